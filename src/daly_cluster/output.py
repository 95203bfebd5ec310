"""Text and CSV output for clustered countries and their proximity graph."""

import csv
from dataclasses import asdict, fields
from pathlib import Path

from daly_cluster.distance import euclidean_distance
from daly_cluster.graph import Adjacency
from daly_cluster.models import Country


def print_report(countries: list[Country], adjacency: Adjacency) -> None:
    """Print graph connections, then each country's cluster label."""
    print("Graph connections:")
    for name, neighbors in adjacency.items():
        print(f"{name} -> {neighbors}")

    print("\nClustered Results:")
    for country in countries:
        label = country.cluster if country.cluster is not None else 0
        print(f"{country.name} - Cluster: {label}")


def save_csvs(
    output_dir: Path,
    output_name: str,
    countries: list[Country],
    adjacency: Adjacency,
) -> None:
    """Save cluster assignments and graph edges to CSV files."""
    print("\n" + "=" * 60)
    print("Saving CSV files...")
    print("=" * 60)

    # Cluster assignments
    clusters_file = output_dir / f"{output_name}_clusters.csv"
    with open(clusters_file, "w", newline="", encoding="utf-8") as f:
        fieldnames = [fld.name for fld in fields(Country)]
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for country in countries:
            writer.writerow(asdict(country))
    print(f"  {clusters_file} ({len(countries)} rows)")

    # Edges, one row per ordered neighbor pair
    by_name = {c.name: c for c in countries}
    edges_file = output_dir / f"{output_name}_edges.csv"
    n_edges = 0
    with open(edges_file, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["source", "target", "distance"])
        writer.writeheader()
        for name, neighbors in adjacency.items():
            for other in neighbors:
                distance = euclidean_distance(by_name[name].features, by_name[other].features)
                writer.writerow({"source": name, "target": other, "distance": distance})
                n_edges += 1
    print(f"  {edges_file} ({n_edges} rows)")
