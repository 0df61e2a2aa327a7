"""
FAQ ingestion: parse a question/answer text file and store one embedding per pair.

File format:

    === Section headers are ignored ===
    Q: How do I reset my password?
    A: Open settings and choose "Reset".
    Continuation lines extend the current answer.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .errors import FaqFormatError
from ..vector.embeddings import IEmbeddingProvider
from ..vector.store import SQLiteVectorStore
from ..vector.types import EmbeddingRecord
from util.logging import logger

QUESTION_PREFIX = "Q: "
ANSWER_PREFIX = "A: "
SECTION_PREFIX = "==="


def format_label(question: str, answer: str) -> str:
    """Build the stored label for a question/answer pair."""
    return f"{QUESTION_PREFIX}{question}\n{ANSWER_PREFIX}{answer}"


def parse_faq(lines: Iterable[str]) -> List[str]:
    """
    Parse FAQ lines into labels of the form "Q: ...\\nA: ...".

    A pair is only emitted when both its question and answer are non-empty.
    Lines that are not part of an answer are ignored.
    """
    labels = []
    question = ""
    answer = ""

    for line in lines:
        trimmed = line.strip()

        if not trimmed or trimmed.startswith(SECTION_PREFIX):
            continue

        if trimmed.startswith(QUESTION_PREFIX):
            if question and answer:
                labels.append(format_label(question, answer))
            question = trimmed[len(QUESTION_PREFIX):]
            answer = ""
        elif trimmed.startswith(ANSWER_PREFIX):
            answer = trimmed[len(ANSWER_PREFIX):]
        elif answer:
            answer += "\n" + trimmed

    if question and answer:
        labels.append(format_label(question, answer))

    return labels


def read_faq(path: str) -> List[str]:
    """Read and parse an FAQ file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_faq(f)
    except OSError as e:
        raise FaqFormatError(f"Cannot read FAQ file '{path}': {e}") from e
    except UnicodeDecodeError as e:
        raise FaqFormatError(f"FAQ file '{path}' is not valid UTF-8: {e}") from e


def load_faq(path: str, store: SQLiteVectorStore, provider: IEmbeddingProvider,
             batch_size: int = 50, progress: Optional[Callable[[int, int], None]] = None) -> int:
    """
    Embed every pair in an FAQ file and append it to the store.

    Each batch is embedded with one provider call and written in one
    transaction, so a failure leaves earlier batches stored and the failing
    batch absent.

    Args:
        path: FAQ file path
        store: Target embedding store
        provider: Embedding provider
        batch_size: Pairs per embedding call and per transaction
        progress: Optional callback receiving (embedded_so_far, total)

    Returns:
        Number of pairs stored
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    labels = read_faq(path)
    total = len(labels)
    source = Path(path).name
    stored = 0

    for start in range(0, total, batch_size):
        batch = labels[start:start + batch_size]
        vectors = provider.embed_texts(batch)
        stored += store.append_many(
            EmbeddingRecord(label=label, vector=vector)
            for label, vector in zip(batch, vectors)
        )
        logger.log_ingest_progress(source, stored, total)
        if progress is not None:
            progress(stored, total)

    return stored
