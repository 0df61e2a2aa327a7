"""
Cosine distance between embedding vectors.
"""

from typing import Sequence

import numpy as np

# Largest possible cosine distance. Also returned for comparisons that have
# no meaningful angle (length mismatch, zero vector) so they rank last.
MAX_DISTANCE = 2.0


def cosine_distance(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Compute cosine distance (1 - cosine similarity) between two vectors.

    Inputs are upcast to float64 before reduction so results do not depend on
    the float32 storage precision beyond the stored values themselves.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Distance in [0, 2]. 2.0 when the lengths differ or either vector has
        zero magnitude. NaN when either vector holds NaN or infinite values.
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    if a.shape != b.shape:
        return MAX_DISTANCE

    magnitude_a = float(np.sqrt(np.dot(a, a)))
    magnitude_b = float(np.sqrt(np.dot(b, b)))

    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return MAX_DISTANCE

    distance = 1.0 - float(np.dot(a, b)) / (magnitude_a * magnitude_b)

    if np.isnan(distance):
        return distance

    # Rounding can land a hair outside the range for (anti)parallel vectors
    return min(max(distance, 0.0), MAX_DISTANCE)
