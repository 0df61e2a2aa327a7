#!/usr/bin/env python3
"""
Interactive FAQ search command loop.

Commands:
  search <query>  - Search for similar questions
  load            - Load FAQ from the configured file
  optimize        - Compact the embedding database
  count           - Show how many Q&A pairs are stored
  quit            - Exit program
Any other input is treated as a search query.
"""

import argparse
import sys
from typing import Callable, TextIO

from .core import config
from .core.errors import ConfigurationError, EmbeddingProviderError, FaqFormatError, StorageError
from .core.faq_loader import load_faq
from .core.search_service import semantic_search
from .vector.embeddings import IEmbeddingProvider
from .vector.store import SQLiteVectorStore

BANNER = """=== FAQ Search System ===
Commands:
  search <query>  - Search for similar questions
  load            - Load FAQ from {faq_path}
  optimize        - Compact the embedding database
  count           - Show how many Q&A pairs are stored
  quit            - Exit program
"""

QUIT_COMMANDS = ("quit", "exit", "q")


class FaqShell:
    """Line-oriented front end over the store, ranker and embedding provider."""

    def __init__(self, store: SQLiteVectorStore, provider: IEmbeddingProvider, faq_path: str,
                 limit: int = 3, out: TextIO = None):
        self.store = store
        self.provider = provider
        self.faq_path = faq_path
        self.limit = limit
        self.out = out or sys.stdout

    def write(self, text: str = "") -> None:
        print(text, file=self.out)

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""
        line = line.strip()
        if not line:
            return True

        parts = line.split(" ", 1)
        command = parts[0]

        if command in QUIT_COMMANDS:
            self.write("Goodbye!")
            return False

        try:
            if command == "load":
                self.load()
            elif command == "optimize":
                self.write("Optimizing embedding database...")
                self.store.optimize()
                self.write("✓ Optimization complete")
            elif command == "count":
                self.write(f"{self.store.count()} Q&A pairs stored")
            elif command == "search":
                if len(parts) < 2 or not parts[1].strip():
                    self.write("Usage: search <your question>")
                else:
                    self.search(parts[1].strip())
            else:
                self.search(line)
        except StorageError as e:
            self.write(f"❌ Storage error: {e}")
        except EmbeddingProviderError as e:
            self.write(f"❌ Embedding error: {e}")
        except FaqFormatError as e:
            self.write(f"❌ FAQ error: {e}")

        return True

    def load(self) -> None:
        self.write("Loading FAQ...")

        def report(embedded: int, total: int) -> None:
            print(f"\rEmbedded {embedded}/{total} questions...", end="", file=self.out)

        count = load_faq(self.faq_path, self.store, self.provider,
                         batch_size=config.INGEST_BATCH_SIZE, progress=report)
        self.write()
        self.write(f"✓ Total embedded: {count} Q&A pairs")
        self.write("  Tip: Run 'optimize' to compact the database")

    def search(self, query: str) -> None:
        self.write(f'\nSearching for: "{query}"')
        self.write("Generating embedding...")

        results = semantic_search(query, self.limit, _vector_store=self.store,
                                  _embedding_provider=self.provider)

        if not results:
            self.write("No results found. Try loading the FAQ first with 'load' command.")
            return

        self.write(f"\n--- Top {len(results)} Results ---")
        for result in results:
            self.write(f"\n{result['rank']}. [Similarity: {result['similarity'] * 100:.2f}%]")
            self.write(f"   {result['label']}")
            if result["strong_match"]:
                self.write("   ✓ Strong match!")
        self.write()

    def run(self, read_line: Callable[[str], str] = None) -> None:
        read_line = read_line or input
        self.write(BANNER.format(faq_path=self.faq_path))
        while True:
            try:
                line = read_line("> ")
            except EOFError:
                self.write()
                break
            if not self.handle(line):
                break


def main(argv=None):
    parser = argparse.ArgumentParser(description="Semantic search over a Q&A file")
    parser.add_argument("--db", default=config.get_db_path(),
                        help=f"SQLite database path (default: {config.get_db_path()})")
    parser.add_argument("--faq", default=config.FAQ_PATH,
                        help=f"FAQ file used by 'load' (default: {config.FAQ_PATH})")
    parser.add_argument("--limit", type=int, default=config.SEARCH_LIMIT,
                        help=f"Results per search (default: {config.SEARCH_LIMIT})")
    parser.add_argument("--provider", default=None, choices=config.VALID_EMBED_PROVIDERS,
                        help="Embedding provider (default: EMBED_PROVIDER)")
    args = parser.parse_args(argv)

    if args.limit < 1:
        parser.error("--limit must be >= 1")

    try:
        store = config.get_vector_store(args.db)
        provider = config.get_embedding_provider(args.provider)
    except StorageError as e:
        print(f"❌ Cannot open embedding database: {e}")
        return 1
    except (EmbeddingProviderError, ConfigurationError) as e:
        print(f"❌ Embedding provider unavailable: {e}")
        return 1

    shell = FaqShell(store, provider, args.faq, limit=args.limit)
    try:
        shell.run()
    except KeyboardInterrupt:
        print("\nGoodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
