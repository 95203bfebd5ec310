"""PNG plots of cluster assignments and the proximity graph."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from matplotlib.colors import to_rgba
from matplotlib.patches import Patch

from daly_cluster.config import RANDOM_SEED
from daly_cluster.models import Country

CLUSTER_CMAP = "Set2"
UNASSIGNED_COLOR = "#999999"
FEATURE_INDEX = {"communicable": 0, "non_communicable": 1, "co2": 2}
FEATURE_PAIRS = [
    ("communicable", "non_communicable", "Communicable", "Non-communicable"),
    ("communicable", "co2", "Communicable", "CO2"),
    ("non_communicable", "co2", "Non-communicable", "CO2"),
]


def save_fig(fig: plt.Figure, path: Path, dpi: int = 150) -> None:
    fig.savefig(path, dpi=dpi, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {path.name}")


def _cluster_colors(labels: list[int | None]) -> list:
    cmap = plt.get_cmap(CLUSTER_CMAP)
    return [
        to_rgba(UNASSIGNED_COLOR) if lbl is None or lbl < 0 else cmap(lbl % cmap.N)
        for lbl in labels
    ]


def _legend(k: int) -> list[Patch]:
    cmap = plt.get_cmap(CLUSTER_CMAP)
    return [Patch(facecolor=cmap(i % cmap.N), label=f"Cluster {i}") for i in range(k)]


def plot_clusters(
    countries: list[Country],
    centroids: np.ndarray,
    out_path: Path,
) -> None:
    """Three pairwise feature scatter plots, colored by cluster, centroids marked."""
    k = len(centroids)
    colors = _cluster_colors([c.cluster for c in countries])

    fig, axes = plt.subplots(1, 3, figsize=(18, 5.5))
    for ax, (x_attr, y_attr, x_label, y_label) in zip(axes, FEATURE_PAIRS):
        xs = [getattr(c, x_attr) for c in countries]
        ys = [getattr(c, y_attr) for c in countries]
        ax.scatter(xs, ys, c=colors, s=30, alpha=0.8, edgecolors="white", linewidths=0.5)

        x_idx = FEATURE_INDEX[x_attr]
        y_idx = FEATURE_INDEX[y_attr]
        ax.scatter(
            centroids[:, x_idx],
            centroids[:, y_idx],
            marker="X",
            s=150,
            c="black",
            label="Centroid",
        )
        ax.set_xlabel(x_label)
        ax.set_ylabel(y_label)
        ax.grid(alpha=0.3)

    axes[0].legend(handles=_legend(k), loc="upper left", fontsize=8)
    fig.suptitle(f"K-Means Clusters (k={k})", fontsize=14, fontweight="bold")
    save_fig(fig, out_path)


def _compute_layout(G: nx.Graph) -> dict[str, tuple[float, float]]:
    """Spring layout with a fixed seed so repeated runs draw the same picture."""
    if G.number_of_nodes() == 0:
        return {}
    return nx.spring_layout(
        G,
        seed=RANDOM_SEED,
        k=2.0 / np.sqrt(G.number_of_nodes()),
        iterations=100,
    )


def plot_network(
    G: nx.Graph,
    k: int,
    threshold: float,
    out_path: Path,
) -> dict:
    """Plot the proximity graph with nodes colored by cluster.

    Returns the position dict for reuse.
    """
    if G.number_of_nodes() == 0:
        return {}

    pos = _compute_layout(G)
    fig, ax = plt.subplots(1, 1, figsize=(14, 10))

    nodes = list(G.nodes())
    node_colors = _cluster_colors([G.nodes[n].get("cluster", -1) for n in nodes])

    # Node sizes proportional to degree
    degrees = dict(G.degree())
    max_deg = max(degrees.values()) or 1
    node_sizes = [80 + 300 * degrees[n] / max_deg for n in nodes]

    nx.draw_networkx_edges(G, pos, ax=ax, alpha=0.2, width=0.6, edge_color="#888888")
    nx.draw_networkx_nodes(
        G,
        pos,
        ax=ax,
        node_color=node_colors,
        node_size=node_sizes,
        alpha=0.85,
        edgecolors="white",
        linewidths=0.5,
    )
    nx.draw_networkx_labels(G, pos, ax=ax, font_size=6)

    ax.legend(handles=_legend(k), loc="upper left", fontsize=9)
    ax.set_title(
        f"Proximity Graph (distance < {threshold})",
        fontsize=14,
        fontweight="bold",
    )
    ax.axis("off")

    save_fig(fig, out_path)
    return pos
