"""
HTTP API for FAQ search: ingest labels, load an FAQ file, and search.
"""

import logging
import math

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.responses import JSONResponse

from .schemas import (
    RecordCreateRequest,
    RecordCreateResponse,
    SearchRequest,
    SearchResult,
    SearchResponse,
    FaqLoadRequest,
    FaqLoadResponse,
    HealthResponse,
)
from ..core import config
from ..core.db import health_check
from ..core.errors import ConfigurationError, EmbeddingProviderError, FaqFormatError, StorageError
from ..core.faq_loader import load_faq
from ..core.search_service import semantic_search
from ..vector.embeddings import IEmbeddingProvider
from ..vector.store import SQLiteVectorStore

logger = logging.getLogger(__name__)

# Initialize the FastAPI application
app = FastAPI(
    title="FAQ Search API",
    version=config.VERSION,
    description="Semantic FAQ search over SQLite-stored embeddings",
    docs_url="/docs" if config.debug_enabled() else None,
    redoc_url="/redoc" if config.debug_enabled() else None
)

_store = None
_provider = None


def get_store() -> SQLiteVectorStore:
    """Shared store for the process, created and initialized on first use."""
    global _store
    if _store is None:
        _store = config.get_vector_store()
    return _store


def get_provider() -> IEmbeddingProvider:
    """Shared embedding provider for the process."""
    global _provider
    if _provider is None:
        _provider = config.get_embedding_provider()
    return _provider


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage error on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": f"Storage unavailable: {exc}"})


@app.exception_handler(EmbeddingProviderError)
async def embedding_error_handler(request: Request, exc: EmbeddingProviderError):
    logger.error(f"Embedding provider error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": f"Embedding provider failed: {exc}"})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(store: SQLiteVectorStore = Depends(get_store)):
    """Check system health."""
    db_health = health_check(store.db_path)
    record_count = store.count() if db_health else 0

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=config.VERSION,
        db_health=db_health,
        record_count=record_count
    )


@app.post("/records", response_model=RecordCreateResponse)
def create_record(request: RecordCreateRequest,
                  store: SQLiteVectorStore = Depends(get_store),
                  provider: IEmbeddingProvider = Depends(get_provider)):
    """Embed a label and append it to the store."""
    vector = provider.embed_text(request.label)
    store.append(request.label, vector)
    return RecordCreateResponse(success=True, label=request.label, dimension=len(vector))


@app.post("/search", response_model=SearchResponse)
def search_endpoint(request: SearchRequest,
                    store: SQLiteVectorStore = Depends(get_store),
                    provider: IEmbeddingProvider = Depends(get_provider)):
    """Search the corpus. An empty corpus returns an empty result list."""
    results = semantic_search(request.query, request.limit,
                              _vector_store=store, _embedding_provider=provider)

    return SearchResponse(
        query=request.query,
        results=[
            SearchResult(
                rank=r["rank"],
                label=r["label"],
                distance=None if math.isnan(r["distance"]) else r["distance"],
                similarity=None if math.isnan(r["similarity"]) else r["similarity"],
                strong_match=r["strong_match"],
            )
            for r in results
        ],
        total=len(results)
    )


@app.post("/faq/load", response_model=FaqLoadResponse)
def load_faq_endpoint(request: FaqLoadRequest,
                      store: SQLiteVectorStore = Depends(get_store),
                      provider: IEmbeddingProvider = Depends(get_provider)):
    """Ingest an FAQ file (defaults to FAQ_PATH)."""
    path = request.path or config.FAQ_PATH
    try:
        loaded = load_faq(path, store, provider, batch_size=config.INGEST_BATCH_SIZE)
    except FaqFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return FaqLoadResponse(success=True, path=path, loaded=loaded)
