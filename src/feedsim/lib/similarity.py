"""Vector similarity utilities for embedding comparisons.

All functions are total: they accept any finite-length numeric sequences
(including empty ones) and return 0 rather than NaN or raising when a
magnitude is zero.
"""

import math
from typing import Sequence

# Dimensions compared by cosine_preview.
PREVIEW_DIMS = 30


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of element-wise products over the shared prefix of ``a`` and ``b``."""
    total = 0.0
    for x, y in zip(a, b):
        total += x * y
    return total


def magnitude(a: Sequence[float]) -> float:
    """Euclidean norm, ``sqrt(dot(a, a))``."""
    return math.sqrt(dot(a, a))


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1], or 0 if either vector has zero magnitude."""
    mag_a = magnitude(a)
    mag_b = magnitude(b)
    if mag_a == 0 or mag_b == 0:
        return 0.0
    return dot(a, b) / (mag_a * mag_b)


def cosine_preview(a: Sequence[float], b: Sequence[float], dims: int = PREVIEW_DIMS) -> float:
    """Coarse cosine over the first ``min(dims, len)`` dimensions of each vector."""
    return cosine(a[: min(dims, len(a))], b[: min(dims, len(b))])
