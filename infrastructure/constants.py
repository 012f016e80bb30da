from pathlib import Path

# Repo-root conventional directories/files (overrideable via experiment.yaml / environment)
CONFIG_DIR = Path("configs")
EXPERIMENT_FILE = CONFIG_DIR / "experiment.yaml"
SYNTHETIC_FILE = CONFIG_DIR / "synthetic.yaml"

DATA_DIR = Path("data")

# Environment variable overrides
DATA_DIR_ENV = "EWS_DATA_DIR"
OUTPUT_ROOT_ENV = "EWS_OUTPUT_ROOT"
