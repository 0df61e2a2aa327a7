"""
Embedding storage and nearest-neighbour retrieval.
"""

from .types import EmbeddingRecord, SearchHit
from .codec import encode_vector, decode_vector
from .distance import cosine_distance, MAX_DISTANCE
from .store import IVectorStore, SQLiteVectorStore
from .ranker import SimilarityRanker
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, GeminiEmbedding, SentenceTransformerEmbedding

__all__ = [
    'EmbeddingRecord',
    'SearchHit',
    'encode_vector',
    'decode_vector',
    'cosine_distance',
    'MAX_DISTANCE',
    'IVectorStore',
    'SQLiteVectorStore',
    'SimilarityRanker',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'GeminiEmbedding',
    'SentenceTransformerEmbedding'
]
