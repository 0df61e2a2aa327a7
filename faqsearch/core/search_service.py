"""
Text search over the FAQ corpus: embed the query, rank stored vectors, format hits.
"""

from typing import List, Dict, Any

from . import config as config_module
from ..vector.embeddings import IEmbeddingProvider
from ..vector.ranker import SimilarityRanker
from ..vector.store import IVectorStore


def semantic_search(query: str, limit: int = None, _vector_store: IVectorStore = None,
                    _embedding_provider: IEmbeddingProvider = None) -> List[Dict[str, Any]]:
    """
    Perform semantic search using cosine distance over every stored record.

    Args:
        query: The search query string
        limit: Maximum number of results to return (defaults to SEARCH_LIMIT)
        _vector_store: Optional vector store, otherwise the configured one
        _embedding_provider: Optional embedding provider, otherwise the configured one

    Returns:
        List of dicts with 'rank', 'label', 'distance', 'similarity', 'strong_match'.
        Empty when the store holds no records.

    Raises:
        StorageError: If the store cannot be read
        EmbeddingProviderError: If the query cannot be embedded
    """
    if limit is None:
        limit = config_module.SEARCH_LIMIT

    vector_store = _vector_store if _vector_store is not None else config_module.get_vector_store()
    embedding_provider = (
        _embedding_provider if _embedding_provider is not None
        else config_module.get_embedding_provider()
    )

    query_embedding = embedding_provider.embed_text(query)
    hits = SimilarityRanker(vector_store).search(query_embedding, limit)

    results = []
    for rank, hit in enumerate(hits, start=1):
        similarity = hit.similarity
        results.append({
            "rank": rank,
            "label": hit.label,
            "distance": float(hit.distance),
            "similarity": float(similarity),
            "strong_match": similarity > config_module.STRONG_MATCH_THRESHOLD,
        })

    return results
