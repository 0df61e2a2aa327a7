"""
Command loop behaviour of the faqsearch CLI.
"""

import io
from unittest.mock import MagicMock

import pytest

from faqsearch import cli
from faqsearch.core.errors import StorageError
from faqsearch.vector.embeddings import DeterministicHashEmbedding
from faqsearch.vector.store import SQLiteVectorStore


@pytest.fixture
def store(tmp_path):
    store = SQLiteVectorStore(str(tmp_path / "embeddings.db"))
    store.initialize()
    return store


@pytest.fixture
def faq_file(tmp_path):
    path = tmp_path / "faq.txt"
    path.write_text("Q: Do you ship abroad?\nA: Yes, worldwide.\nQ: Refunds?\nA: 30 days.\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def shell(store, faq_file):
    return cli.FaqShell(store, DeterministicHashEmbedding(dimension=16), faq_file, limit=3, out=io.StringIO())


def output(shell):
    return shell.out.getvalue()


def test_quit_commands_stop_the_loop(shell):
    for command in ("quit", "exit", "q"):
        assert shell.handle(command) is False
    assert "Goodbye!" in output(shell)


def test_blank_line_is_ignored(shell):
    assert shell.handle("   ") is True
    assert output(shell) == ""


def test_search_on_empty_store(shell):
    assert shell.handle("search where is my order") is True
    assert "No results found. Try loading the FAQ first with 'load' command." in output(shell)


def test_search_without_query_prints_usage(shell):
    shell.handle("search")
    assert "Usage: search <your question>" in output(shell)


def test_load_then_search(shell, store):
    shell.handle("load")
    assert store.count() == 2
    assert "Total embedded: 2 Q&A pairs" in output(shell)

    shell.handle("search Q: Refunds?\nA: 30 days.")
    text = output(shell)
    assert "--- Top 2 Results ---" in text
    assert "[Similarity: 100.00%]" in text
    assert "✓ Strong match!" in text


def test_free_text_is_treated_as_search(shell):
    shell.handle("how long do refunds take")
    assert 'Searching for: "how long do refunds take"' in output(shell)


def test_count_and_optimize(shell, store):
    store.append("x", [1.0])
    shell.handle("count")
    shell.handle("optimize")
    assert "1 Q&A pairs stored" in output(shell)
    assert "Optimization complete" in output(shell)


def test_load_missing_file_reports_error(store, tmp_path):
    shell = cli.FaqShell(store, DeterministicHashEmbedding(dimension=8), str(tmp_path / "none.txt"),
                         out=io.StringIO())
    assert shell.handle("load") is True
    assert "FAQ error" in output(shell)


def test_storage_error_is_reported_distinctly(faq_file):
    failing_store = MagicMock()
    failing_store.enumerate.side_effect = StorageError("disk I/O error", operation="enumerate")
    shell = cli.FaqShell(failing_store, DeterministicHashEmbedding(dimension=8), faq_file, out=io.StringIO())

    assert shell.handle("search anything") is True
    text = output(shell)
    assert "Storage error" in text
    assert "No results found" not in text


def test_run_reads_until_quit(shell):
    lines = iter(["count", "quit", "count"])
    shell.run(read_line=lambda prompt: next(lines))
    text = output(shell)
    assert "=== FAQ Search System ===" in text
    assert text.count("Q&A pairs stored") == 1


def test_run_stops_on_eof(shell):
    def read_line(prompt):
        raise EOFError

    shell.run(read_line=read_line)
    assert "=== FAQ Search System ===" in output(shell)


def test_main_with_hash_provider(tmp_path, monkeypatch, capsys):
    def fake_input(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    db_path = tmp_path / "nested" / "embeddings.db"

    exit_code = cli.main(["--db", str(db_path), "--provider", "hash"])

    assert exit_code == 0
    assert db_path.exists()
    assert "=== FAQ Search System ===" in capsys.readouterr().out


def test_main_rejects_bad_limit(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--db", str(tmp_path / "e.db"), "--provider", "hash", "--limit", "0"])
