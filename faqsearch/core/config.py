"""
Configuration for faqsearch, read from environment variables (and a .env file).
Only this module touches the environment; everything else gets values injected.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/embeddings.db")

# FAQ source used by the `load` command
FAQ_PATH = os.getenv("FAQ_PATH", "faq.txt")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Embedding provider configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "gemini")  # gemini|hash|sentence-transformers
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_EMBED_MODEL = os.getenv("GEMINI_EMBED_MODEL", "gemini-embedding-001")
GEMINI_TIMEOUT_SEC = int(os.getenv("GEMINI_TIMEOUT_SEC", "30"))
HASH_EMBED_DIMENSION = int(os.getenv("HASH_EMBED_DIMENSION", "384"))
ST_MODEL_NAME = os.getenv("ST_MODEL_NAME", "all-mpnet-base-v2")

# Search and ingest tuning
SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "3"))
STRONG_MATCH_THRESHOLD = float(os.getenv("STRONG_MATCH_THRESHOLD", "0.7"))
INGEST_BATCH_SIZE = int(os.getenv("INGEST_BATCH_SIZE", "50"))

VALID_EMBED_PROVIDERS = ["gemini", "hash", "sentence-transformers"]

# Version string
VERSION = "0.1.0"


def get_db_path():
    """Get the database path, honouring a DB_PATH changed after import."""
    return os.getenv("DB_PATH", DB_PATH)


def get_vector_store(db_path: str = None):
    """Get an initialized SQLite vector store for the configured database."""
    from ..vector.store import SQLiteVectorStore

    path = db_path or get_db_path()
    ensure_db_directory(path)
    store = SQLiteVectorStore(path)
    store.initialize()
    return store


def get_ranker(store=None):
    """Get a similarity ranker over the given (or configured) store."""
    from ..vector.ranker import SimilarityRanker
    return SimilarityRanker(store if store is not None else get_vector_store())


def get_embedding_provider(provider_name: str = None):
    """Get the configured embedding provider. Credentials are resolved here and injected."""
    name = (provider_name or os.getenv("EMBED_PROVIDER", EMBED_PROVIDER)).lower()

    if name == "gemini":
        from ..vector.embeddings import GeminiEmbedding
        return GeminiEmbedding(
            api_key=os.getenv("GEMINI_API_KEY", GEMINI_API_KEY),
            model=GEMINI_EMBED_MODEL,
            timeout=GEMINI_TIMEOUT_SEC,
        )
    elif name == "hash":
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=HASH_EMBED_DIMENSION)
    elif name == "sentence-transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(ST_MODEL_NAME)
    else:
        from .errors import ConfigurationError
        raise ConfigurationError(f"Invalid EMBED_PROVIDER: {name}")


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    provider = os.getenv("EMBED_PROVIDER", EMBED_PROVIDER).lower()
    if provider not in VALID_EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {provider}")

    if provider == "gemini" and not os.getenv("GEMINI_API_KEY", GEMINI_API_KEY):
        issues.append("EMBED_PROVIDER=gemini requires GEMINI_API_KEY")

    if SEARCH_LIMIT < 1:
        issues.append("SEARCH_LIMIT must be >= 1")

    if not 0.0 <= STRONG_MATCH_THRESHOLD <= 1.0:
        issues.append("STRONG_MATCH_THRESHOLD must be between 0 and 1")

    if INGEST_BATCH_SIZE < 1:
        issues.append("INGEST_BATCH_SIZE must be >= 1")

    if GEMINI_TIMEOUT_SEC < 1:
        issues.append("GEMINI_TIMEOUT_SEC must be >= 1")

    return issues
