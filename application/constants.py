"""Application-level constants."""

from pathlib import Path

# Metric key prefixes
HOLDOUT_PREFIX = "holdout_"

# Coefficient table column suffixes
NAIVE_SUFFIX = "_naive"
CLUSTER_SUFFIX = "_cluster"

# Output filenames
METRICS_FILENAME = "metrics.json"
CONFUSION_FILENAME = "confusion_matrix.csv"
HOLDOUT_CONFUSION_FILENAME = "holdout_confusion_matrix.csv"
COEFFICIENTS_FILENAME = "coefficients.csv"
EFFECT_SIZES_FILENAME = "effect_sizes.csv"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"

# Output directory structure
OUTPUT_ROOT = Path("outputs")
LOG_FILENAME = "run.log"
