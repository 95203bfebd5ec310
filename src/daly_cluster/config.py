"""Configuration constants for the DALY / emissions clustering pipeline."""

DEFAULT_K = 5
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_THRESHOLD = 0.5  # compared against raw feature distances unless --normalize

RANDOM_SEED = 42  # documented seed for reproducible runs (--seed)

DEFAULT_DATA_FILE = "life expectancy.csv"
RESULTS_ROOT = "results"
ANALYSIS_NAME = "kmeans"

# Column positions in the source CSV (0-based, header row skipped)
NAME_COLUMN = 0
COMMUNICABLE_COLUMN = 8
NON_COMMUNICABLE_COLUMN = 9
CO2_COLUMN = 12

FEATURE_NAMES = ("communicable", "non_communicable", "co2")
