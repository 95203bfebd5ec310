"""Cluster-then-graph pipeline over loaded country records."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from daly_cluster.clustering import KMeansResult, cluster_sizes, kmeans
from daly_cluster.config import DEFAULT_K, DEFAULT_MAX_ITERATIONS, DEFAULT_THRESHOLD
from daly_cluster.graph import Adjacency, build_graph, count_edges
from daly_cluster.models import Country


@dataclass
class AnalysisResult:
    """Labeled countries, their k-means run, and the proximity graph."""

    countries: list[Country]
    kmeans: KMeansResult
    adjacency: Adjacency
    k: int
    threshold: float


def print_header(title: str) -> None:
    width = 80
    print(f"\n{'=' * width}")
    print(f"  {title}")
    print(f"{'=' * width}")


def run_analysis(
    countries: list[Country],
    k: int = DEFAULT_K,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    threshold: float = DEFAULT_THRESHOLD,
    rng: np.random.Generator | None = None,
) -> AnalysisResult | None:
    """Run k-means on the countries, then build the threshold graph.

    Returns None when there are no countries. Raises InsufficientDataError
    when k exceeds the number of countries, before any clustering is done.
    """
    if not countries:
        print("No valid data found.")
        return None

    print_header(f"K-Means (k={k}, max_iterations={max_iterations})")
    result = kmeans(countries, k, max_iterations, rng=rng)
    status = "converged" if result.converged else "stopped at iteration budget"
    print(f"  {status} after {result.n_iterations} iteration(s)")
    if result.sse_history:
        print(f"  within-cluster SSE: {result.sse_history[-1]:.4f}")
    for index, size in enumerate(cluster_sizes(countries, k)):
        print(f"  cluster {index}: {size} countries")

    print_header(f"Proximity Graph (threshold={threshold})")
    adjacency = build_graph(result.countries, threshold)
    print(f"  {len(adjacency)} nodes, {count_edges(adjacency)} edges")

    return AnalysisResult(
        countries=result.countries,
        kmeans=result,
        adjacency=adjacency,
        k=k,
        threshold=threshold,
    )
