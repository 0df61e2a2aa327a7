"""
Embedding providers: turn text into float32 vectors for the store and ranker.
Providers receive their configuration through the constructor.
"""

from abc import ABC, abstractmethod
import hashlib
import time
from typing import List, Optional

import numpy as np
import requests

from ..core.errors import EmbeddingProviderError
from util.logging import logger

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector for given text."""
        pass

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """Generate embedding vectors for several texts, in input order."""
        return [self.embed_text(text) for text in texts]

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    Generates reproducible embeddings from text without any model or network
    access. Similar texts do NOT get similar vectors; only identical texts do.
    """

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        self.dimension = dimension

    def embed_text(self, text: str) -> List[float]:
        """Generate deterministic embedding vector using a chained SHA-256 digest."""
        vector = []
        counter = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{counter}:{text}".encode("utf-8")).digest()
            for i in range(0, len(digest), 4):
                value = int.from_bytes(digest[i:i + 4], "little")
                # Map to [-1, 1]
                vector.append((value / 2**32) * 2 - 1)
            counter += 1

        return np.asarray(vector[:self.dimension], dtype=np.float32).tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class GeminiEmbedding(IEmbeddingProvider):
    """Gemini embedding provider using the Generative Language REST API."""

    provider_name = "gemini"

    def __init__(self, api_key: Optional[str], model: str = "gemini-embedding-001",
                 timeout: int = 30, session: Optional[requests.Session] = None,
                 api_base: str = GEMINI_API_BASE):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Gemini API key (required)
            model: Embedding model id, without the "models/" prefix
            timeout: HTTP timeout in seconds
            session: Optional requests session, e.g. for connection reuse
            api_base: API root URL
        """
        if not api_key:
            raise EmbeddingProviderError("GEMINI_API_KEY is not set", provider=self.provider_name)
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.api_base = api_base.rstrip("/")
        self._dimension = None

    def embed_text(self, text: str) -> List[float]:
        """Embed one text with `embedContent`."""
        data = self._post("embedContent", self._content_request(text))
        try:
            values = data["embedding"]["values"]
        except (KeyError, TypeError) as e:
            raise EmbeddingProviderError(
                "Gemini response has no embedding values", provider=self.provider_name
            ) from e
        return self._to_vector(values)

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """Embed several texts with one `batchEmbedContents` call."""
        if not texts:
            return []

        data = self._post("batchEmbedContents", {
            "requests": [self._content_request(text) for text in texts]
        })
        try:
            vectors = [self._to_vector(item["values"]) for item in data["embeddings"]]
        except (KeyError, TypeError) as e:
            raise EmbeddingProviderError(
                "Gemini batch response has no embedding values", provider=self.provider_name
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingProviderError(
                f"Gemini returned {len(vectors)} embeddings for {len(texts)} texts",
                provider=self.provider_name,
            )
        return vectors

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors (probes the API once)."""
        if self._dimension is None:
            self._dimension = len(self.embed_text("dimension probe"))
        return self._dimension

    def _content_request(self, text: str) -> dict:
        return {
            "model": f"models/{self.model}",
            "content": {"parts": [{"text": text}]},
        }

    def _post(self, method: str, payload: dict) -> dict:
        url = f"{self.api_base}/models/{self.model}:{method}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        start_time = time.time()
        try:
            resp = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.log_embedding_request(self.provider_name, method, start_time, time.time(), status="failed")
            raise EmbeddingProviderError(f"Gemini request failed: {e}", provider=self.provider_name) from e

        if resp.status_code != 200:
            logger.log_embedding_request(self.provider_name, method, start_time, time.time(),
                                         status="failed", details={"status_code": resp.status_code})
            raise EmbeddingProviderError(
                f"Gemini error ({self.model}): {resp.status_code} {resp.text[:200]}",
                provider=self.provider_name,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise EmbeddingProviderError("Gemini returned invalid JSON", provider=self.provider_name) from e

        logger.log_embedding_request(self.provider_name, method, start_time, time.time())
        return data

    @staticmethod
    def _to_vector(values) -> List[float]:
        # The API returns doubles; the store keeps float32
        return np.asarray(values, dtype=np.float32).tolist()


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained local models.

    Requires the optional `local` extra (sentence-transformers).
    """

    def __init__(self, model_name: str = "all-mpnet-base-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise EmbeddingProviderError(
                    "sentence-transformers not installed. Install the 'local' extra.",
                    provider="sentence-transformers",
                ) from e
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return np.asarray(embedding, dtype=np.float32).tolist()

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        embeddings = self.model.encode(texts, convert_to_tensor=False)
        return [np.asarray(e, dtype=np.float32).tolist() for e in embeddings]

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension
