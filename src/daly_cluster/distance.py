"""Euclidean distance between feature vectors."""

import math
from collections.abc import Sequence


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the Euclidean distance between two equal-length vectors.

    Each squared term is computed from the difference, so swapping the
    arguments only flips the sign before squaring and the result is
    bit-for-bit symmetric.

    Raises ValueError when the vectors differ in length.
    """
    if len(a) != len(b):
        raise ValueError(f"Dimension mismatch: {len(a)} != {len(b)}")
    total = 0.0
    for x, y in zip(a, b):
        diff = float(x) - float(y)
        total += diff * diff
    return math.sqrt(total)
