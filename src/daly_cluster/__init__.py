"""DALY / emissions clustering - k-means and proximity graphs over country records."""

__version__ = "0.1.0"

from daly_cluster.clustering import InsufficientDataError as InsufficientDataError
from daly_cluster.clustering import KMeansResult as KMeansResult
from daly_cluster.clustering import kmeans as kmeans
from daly_cluster.distance import euclidean_distance as euclidean_distance
from daly_cluster.graph import build_graph as build_graph
from daly_cluster.loader import DataLoadError as DataLoadError
from daly_cluster.loader import load_countries as load_countries
from daly_cluster.models import Country as Country
from daly_cluster.pipeline import run_analysis as run_analysis
