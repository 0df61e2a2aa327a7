"""
Packed binary layout for stored vectors.

A vector of D float32 values is stored as exactly 4*D bytes, little-endian,
with no separators or length prefix. D is recovered from the blob length.
"""

from typing import Sequence

import numpy as np

from ..core.errors import VectorDecodeError

VECTOR_DTYPE = np.dtype("<f4")


def encode_vector(vector: Sequence[float]) -> bytes:
    """Pack a vector into little-endian float32 bytes."""
    array = np.asarray(vector, dtype=VECTOR_DTYPE)
    if array.ndim != 1:
        raise ValueError(f"Vector must be one-dimensional, got shape {array.shape}")
    return array.tobytes()


def decode_vector(blob: bytes) -> np.ndarray:
    """Unpack little-endian float32 bytes into a float32 array."""
    if len(blob) % VECTOR_DTYPE.itemsize != 0:
        raise VectorDecodeError(
            f"Vector blob of {len(blob)} bytes is not a multiple of {VECTOR_DTYPE.itemsize}",
            byte_length=len(blob),
        )
    # frombuffer returns a read-only view; copy so callers own their data
    return np.frombuffer(blob, dtype=VECTOR_DTYPE).astype(np.float32)
