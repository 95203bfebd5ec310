"""
Tests for the Euclidean distance metric in distance.py.

Run: uv run pytest tests/test_distance.py -v
"""

import math

import numpy as np
import pytest

from daly_cluster.distance import euclidean_distance

A = (10.0, 20.0, 5.0)
B = (15.0, 25.0, 10.0)
C = (30.0, 35.0, 20.0)

# ── Known values ─────────────────────────────────────────────────────────────


class TestKnownDistances:
    """Hand-computed distances between the three reference countries."""

    def test_a_to_b(self) -> None:
        assert euclidean_distance(A, B) == pytest.approx(math.sqrt(75), abs=1e-12)
        assert euclidean_distance(A, B) == pytest.approx(8.660, abs=1e-3)

    def test_a_to_c(self) -> None:
        assert euclidean_distance(A, C) == pytest.approx(29.155, abs=1e-3)

    def test_b_to_c(self) -> None:
        assert euclidean_distance(B, C) == pytest.approx(20.616, abs=1e-3)

    def test_accepts_numpy_rows(self) -> None:
        assert euclidean_distance(np.array(A), np.array(B)) == euclidean_distance(A, B)


# ── Metric properties ────────────────────────────────────────────────────────


class TestMetricProperties:
    """Symmetry, non-negativity and identity on random vectors."""

    @pytest.fixture
    def vectors(self) -> np.ndarray:
        rng = np.random.default_rng(7)
        return rng.normal(0, 1000, size=(30, 3))

    def test_symmetric(self, vectors: np.ndarray) -> None:
        for a in vectors:
            for b in vectors:
                assert euclidean_distance(a, b) == euclidean_distance(b, a)

    def test_non_negative(self, vectors: np.ndarray) -> None:
        assert all(euclidean_distance(a, b) >= 0 for a in vectors for b in vectors)

    def test_self_distance_zero(self, vectors: np.ndarray) -> None:
        assert all(euclidean_distance(a, a) == 0.0 for a in vectors)

    def test_deterministic(self) -> None:
        assert euclidean_distance(A, C) == euclidean_distance(A, C)


# ── Precondition violations ──────────────────────────────────────────────────


class TestDimensionMismatch:
    """Vectors of different length are a programmer error."""

    def test_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Dimension mismatch"):
            euclidean_distance((1.0, 2.0, 3.0), (1.0, 2.0))
