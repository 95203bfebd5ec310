"""Command-line interface for DALY / emissions clustering."""

import argparse
from pathlib import Path

import numpy as np

from daly_cluster.clustering import InsufficientDataError
from daly_cluster.config import (
    ANALYSIS_NAME,
    DEFAULT_DATA_FILE,
    DEFAULT_K,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_THRESHOLD,
    RESULTS_ROOT,
)
from daly_cluster.graph import compute_graph_summary, graph_to_networkx
from daly_cluster.loader import DataLoadError, load_countries, normalize_features
from daly_cluster.output import print_report, save_csvs
from daly_cluster.pipeline import run_analysis
from daly_cluster.plots import plot_clusters, plot_network
from daly_cluster.run_context import RunContext, dataset_slug


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="daly-cluster",
        description=(
            "Cluster countries by disease burden and CO2 emissions (k-means), "
            "then link countries whose feature vectors are within a distance threshold."
        ),
    )
    parser.add_argument(
        "data_file",
        nargs="?",
        type=Path,
        default=Path(DEFAULT_DATA_FILE),
        help=f"Source CSV (default: '{DEFAULT_DATA_FILE}')",
    )
    parser.add_argument(
        "--k",
        type=int,
        default=DEFAULT_K,
        help=f"Number of clusters (default: {DEFAULT_K})",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help=f"Maximum k-means iterations (default: {DEFAULT_MAX_ITERATIONS})",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Graph distance cutoff, in feature units (default: {DEFAULT_THRESHOLD})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for centroid initialization (default: unseeded)",
    )
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Min-max scale each feature to [0, 1] before clustering",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path(RESULTS_ROOT),
        help=f"Results root directory (default: {RESULTS_ROOT}/)",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip writing PNG plots",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Do not print the per-country report",
    )

    args = parser.parse_args(argv)

    if args.k < 1:
        parser.error("--k must be at least 1")
    if args.max_iterations < 0:
        parser.error("--max-iterations must be non-negative")
    if args.threshold < 0:
        parser.error("--threshold must be non-negative")

    dataset = dataset_slug(args.data_file)
    rng = np.random.default_rng(args.seed) if args.seed is not None else None

    try:
        with RunContext(
            dataset=dataset,
            analysis_name=ANALYSIS_NAME,
            params=vars(args),
            results_root=args.output,
        ) as ctx:
            countries = load_countries(args.data_file)
            if args.normalize:
                countries = normalize_features(countries)

            result = run_analysis(
                countries,
                k=args.k,
                max_iterations=args.max_iterations,
                threshold=args.threshold,
                rng=rng,
            )
            if result is None:
                return

            G = graph_to_networkx(result.countries, result.adjacency)
            summary = compute_graph_summary(G)
            print(
                f"  components: {summary['n_components']}, "
                f"largest: {summary['largest_component']}, "
                f"isolates: {summary['n_isolates']}, density: {summary['density']}"
            )

            if not args.quiet:
                print()
                print_report(result.countries, result.adjacency)

            save_csvs(ctx.data_dir, dataset, result.countries, result.adjacency)

            if not args.no_plots:
                plot_clusters(
                    result.countries,
                    result.kmeans.centroids,
                    ctx.plots_dir / "clusters.png",
                )
                plot_network(G, result.k, result.threshold, ctx.plots_dir / "network.png")
    except (DataLoadError, InsufficientDataError) as exc:
        parser.exit(1, f"error: {exc}\n")
