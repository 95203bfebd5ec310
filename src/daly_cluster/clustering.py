"""K-means clustering of countries on their three feature values.

The engine runs the classic Lloyd iteration:

  1. initialize_centroids() samples k distinct countries as starting centroids
  2. assign_clusters() labels every country with its nearest centroid
  3. update_centroids() recomputes each centroid as the mean of its members
  4. kmeans() repeats 2-3 until the centroids stop moving or the iteration
     budget is spent

Two edge behaviors:

- Ties go to the lowest centroid index (strict less-than scan).
- A cluster that ends an assignment pass with no members gets the zero vector
  as its next centroid, not its previous position. Such a "dead" cluster only
  regains members if some country is closer to the origin than to every other
  centroid.

Labels in the returned result were computed against ``KMeansResult.centroids``.
No extra assignment pass runs after the final centroid update.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from daly_cluster.distance import euclidean_distance
from daly_cluster.models import Country

N_FEATURES = 3

# Process-wide random source, used when the caller does not inject one
_DEFAULT_RNG = np.random.default_rng()


class InsufficientDataError(ValueError):
    """Raised when more clusters are requested than there are records."""

    def __init__(self, k: int, n_records: int) -> None:
        self.k = k
        self.n_records = n_records
        super().__init__(f"Cannot form k={k} clusters from {n_records} record(s)")


@dataclass
class KMeansResult:
    """Outcome of a k-means run.

    Attributes:
        countries: The input list; each country's ``cluster`` was set in place.
        centroids: (k, 3) array the final labels were assigned against.
        n_iterations: Number of assignment passes performed.
        converged: True if a centroid update produced no change.
        sse_history: Within-cluster squared distance after each assignment pass.
    """

    countries: list[Country]
    centroids: np.ndarray
    n_iterations: int
    converged: bool
    sse_history: list[float] = field(default_factory=list)

    @property
    def k(self) -> int:
        return len(self.centroids)


def feature_matrix(countries: list[Country]) -> np.ndarray:
    """Stack country feature vectors into an (n, 3) float array."""
    return np.array([c.features for c in countries], dtype=float).reshape(-1, N_FEATURES)


def _check_k(k: int, n_records: int) -> None:
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    if k > n_records:
        raise InsufficientDataError(k, n_records)


def initialize_centroids(
    countries: list[Country],
    k: int,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Pick k distinct countries uniformly at random as the initial centroids.

    Only the feature vectors are kept. Raises InsufficientDataError if
    k exceeds the number of countries.
    """
    _check_k(k, len(countries))
    rng = rng if rng is not None else _DEFAULT_RNG
    indices = rng.choice(len(countries), size=k, replace=False)
    return feature_matrix([countries[int(i)] for i in indices])


def assign_clusters(countries: list[Country], centroids: np.ndarray) -> None:
    """Label each country with the index of its nearest centroid.

    Scans centroids in order with strict less-than, so on equal distances
    the first centroid wins.
    """
    for country in countries:
        features = country.features
        best_index = 0
        best_distance = math.inf
        for index, centroid in enumerate(centroids):
            distance = euclidean_distance(features, centroid)
            if distance < best_distance:
                best_distance = distance
                best_index = index
        country.cluster = best_index


def update_centroids(countries: list[Country], k: int) -> np.ndarray:
    """Return the mean feature vector of each cluster's current members.

    Clusters with no members get the zero vector. Unlabeled countries are
    ignored.
    """
    sums = np.zeros((k, N_FEATURES), dtype=float)
    counts = np.zeros(k, dtype=int)

    for country in countries:
        if country.cluster is None:
            continue
        sums[country.cluster] += country.features
        counts[country.cluster] += 1

    for i in range(k):
        if counts[i] > 0:
            sums[i] /= counts[i]
    return sums


def within_cluster_sse(countries: list[Country], centroids: np.ndarray) -> float:
    """Sum of squared distances from each labeled country to its centroid."""
    total = 0.0
    for country in countries:
        if country.cluster is None:
            continue
        total += euclidean_distance(country.features, centroids[country.cluster]) ** 2
    return total


def cluster_sizes(countries: list[Country], k: int) -> list[int]:
    """Number of countries labeled with each cluster index 0..k-1."""
    sizes = [0] * k
    for country in countries:
        if country.cluster is not None:
            sizes[country.cluster] += 1
    return sizes


def kmeans(
    countries: list[Country],
    k: int,
    max_iterations: int,
    rng: np.random.Generator | None = None,
) -> KMeansResult:
    """Cluster countries into k groups.

    Each iteration assigns labels against the current centroids, then
    computes candidate centroids. If the candidates equal the current set
    exactly, the loop stops; otherwise the candidates are adopted and the
    loop continues until ``max_iterations`` passes have run.
    Labels from any earlier run are cleared before initialization.

    Raises InsufficientDataError before any work if k > len(countries).
    """
    _check_k(k, len(countries))
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")

    for country in countries:
        country.cluster = None

    centroids = initialize_centroids(countries, k, rng)
    assigned_against = centroids
    sse_history: list[float] = []
    converged = False
    n_iterations = 0

    for _ in range(max_iterations):
        assign_clusters(countries, centroids)
        assigned_against = centroids
        n_iterations += 1
        sse_history.append(within_cluster_sse(countries, centroids))

        new_centroids = update_centroids(countries, k)
        if np.array_equal(centroids, new_centroids):
            converged = True
            break
        centroids = new_centroids

    return KMeansResult(
        countries=countries,
        centroids=assigned_against,
        n_iterations=n_iterations,
        converged=converged,
        sse_history=sse_history,
    )
