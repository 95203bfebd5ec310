"""Threshold proximity graph over country feature vectors.

Two countries are neighbors when the Euclidean distance between their
feature vectors is strictly below the threshold. Every ordered pair is
evaluated independently (O(n^2) distance calls); the adjacency is not built
from an upper triangle, so its symmetry follows from the metric itself.
"""

from __future__ import annotations

import networkx as nx

from daly_cluster.distance import euclidean_distance
from daly_cluster.models import Country

Adjacency = dict[str, list[str]]


def build_graph(countries: list[Country], threshold: float) -> Adjacency:
    """Map each country name to the names of countries within ``threshold``.

    Keys and neighbor lists follow the input order. A country is never its
    own neighbor. Works on clustered or unclustered countries alike.

    Raises ValueError for a negative threshold or duplicate names.
    """
    if threshold < 0:
        raise ValueError(f"threshold must be non-negative, got {threshold}")

    names = [c.name for c in countries]
    if len(set(names)) != len(names):
        raise ValueError("Country names must be unique to build a name-keyed graph")

    adjacency: Adjacency = {}
    for i, country in enumerate(countries):
        neighbors = []
        for j, other in enumerate(countries):
            if i == j:
                continue
            if euclidean_distance(country.features, other.features) < threshold:
                neighbors.append(other.name)
        adjacency[country.name] = neighbors
    return adjacency


def count_edges(adjacency: Adjacency) -> int:
    """Number of undirected edges (each pair appears in both neighbor lists)."""
    return sum(len(neighbors) for neighbors in adjacency.values()) // 2


def graph_to_networkx(countries: list[Country], adjacency: Adjacency) -> nx.Graph:
    """Build an undirected networkx graph from an adjacency mapping.

    Nodes: country names with attributes (cluster, communicable,
    non_communicable, co2). Edges carry the feature-space ``distance``.
    """
    by_name = {c.name: c for c in countries}
    G = nx.Graph()

    for country in countries:
        G.add_node(
            country.name,
            cluster=country.cluster if country.cluster is not None else -1,
            communicable=country.communicable,
            non_communicable=country.non_communicable,
            co2=country.co2,
        )

    for name, neighbors in adjacency.items():
        for other in neighbors:
            if G.has_edge(name, other):
                continue
            G.add_edge(
                name,
                other,
                distance=euclidean_distance(by_name[name].features, by_name[other].features),
            )

    return G


def compute_graph_summary(G: nx.Graph) -> dict:
    """Compute summary statistics for a proximity graph."""
    n_nodes = G.number_of_nodes()
    n_edges = G.number_of_edges()
    density = nx.density(G) if n_nodes > 1 else 0.0

    components = list(nx.connected_components(G))
    largest = max((len(c) for c in components), default=0)

    return {
        "n_nodes": n_nodes,
        "n_edges": n_edges,
        "density": round(density, 4),
        "n_components": len(components),
        "largest_component": largest,
        "n_isolates": nx.number_of_isolates(G),
    }
