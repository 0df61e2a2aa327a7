"""
FAQ parsing and ingestion into the embedding store.
"""

from unittest.mock import MagicMock

import pytest

from faqsearch.core.errors import EmbeddingProviderError, FaqFormatError
from faqsearch.core.faq_loader import parse_faq, load_faq, format_label
from faqsearch.vector.embeddings import DeterministicHashEmbedding
from faqsearch.vector.store import SQLiteVectorStore

FAQ_TEXT = """=== Accounts ===
Q: How do I reset my password?
A: Open settings and choose Reset.

Q: Can I change my username?
A: Yes, once a month.
Contact support for more changes.

=== Billing ===
Q: Do you offer refunds?
A: Within 30 days.
"""


@pytest.fixture
def store(tmp_path):
    store = SQLiteVectorStore(str(tmp_path / "embeddings.db"))
    store.initialize()
    return store


@pytest.fixture
def faq_file(tmp_path):
    path = tmp_path / "faq.txt"
    path.write_text(FAQ_TEXT, encoding="utf-8")
    return str(path)


def test_parse_pairs_and_continuations():
    """Pairs are labelled "Q: ...\\nA: ..." and continuation lines join the answer."""
    labels = parse_faq(FAQ_TEXT.splitlines())

    assert labels == [
        "Q: How do I reset my password?\nA: Open settings and choose Reset.",
        "Q: Can I change my username?\nA: Yes, once a month.\nContact support for more changes.",
        "Q: Do you offer refunds?\nA: Within 30 days.",
    ]


def test_parse_skips_question_without_answer():
    """A question with no answer is dropped when the next question starts."""
    labels = parse_faq([
        "Q: Unanswered?",
        "Q: Answered?",
        "A: Yes.",
    ])
    assert labels == [format_label("Answered?", "Yes.")]


def test_parse_ignores_stray_lines_before_answer():
    """Text between a question and its answer is not part of anything."""
    labels = parse_faq([
        "preamble",
        "Q: Question?",
        "stray text",
        "A: Answer.",
    ])
    assert labels == ["Q: Question?\nA: Answer."]


def test_parse_trims_whitespace():
    labels = parse_faq(["   Q: Spaced?   ", "\tA: Trimmed.  "])
    assert labels == ["Q: Spaced?\nA: Trimmed."]


def test_parse_empty_input():
    assert parse_faq([]) == []
    assert parse_faq(["", "=== Only a header ==="]) == []


def test_load_faq_stores_every_pair(faq_file, store):
    """Each pair is embedded and appended."""
    count = load_faq(faq_file, store, DeterministicHashEmbedding(dimension=32))

    assert count == 3
    assert store.count() == 3
    labels = [record.label for record in store.enumerate()]
    assert labels[0] == "Q: How do I reset my password?\nA: Open settings and choose Reset."


def test_load_faq_batches_provider_calls(faq_file, store):
    """Texts are embedded in batches of batch_size."""
    provider = MagicMock()
    provider.embed_texts.side_effect = lambda texts: [[1.0, 0.0] for _ in texts]
    progress = []

    count = load_faq(faq_file, store, provider, batch_size=2,
                     progress=lambda done, total: progress.append((done, total)))

    assert count == 3
    assert [len(call.args[0]) for call in provider.embed_texts.call_args_list] == [2, 1]
    assert progress == [(2, 3), (3, 3)]


def test_load_faq_missing_file(tmp_path, store):
    with pytest.raises(FaqFormatError):
        load_faq(str(tmp_path / "nope.txt"), store, DeterministicHashEmbedding(dimension=8))


def test_load_faq_provider_failure_keeps_earlier_batches(faq_file, store):
    """A failing batch is not stored; batches before it are."""
    provider = MagicMock()
    provider.embed_texts.side_effect = [
        [[1.0, 0.0], [0.0, 1.0]],
        EmbeddingProviderError("quota exceeded", provider="gemini"),
    ]

    with pytest.raises(EmbeddingProviderError):
        load_faq(faq_file, store, provider, batch_size=2)

    assert store.count() == 2


def test_load_faq_rejects_bad_batch_size(faq_file, store):
    with pytest.raises(ValueError):
        load_faq(faq_file, store, DeterministicHashEmbedding(dimension=8), batch_size=0)
