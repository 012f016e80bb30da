"""Configuration loading from YAML files."""

import os
from pathlib import Path
from typing import Any

import yaml

from infrastructure.config.models import (
    ColumnsConfig,
    RunConfig,
    StatsConfig,
    SyntheticDataConfig,
    ThresholdConfig,
)
from infrastructure.constants import DATA_DIR, DATA_DIR_ENV


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def resolve_data_dir(configured: str | None) -> Path:
    """Data directory: environment override, then YAML value, then the repo default."""
    env_value = os.environ.get(DATA_DIR_ENV)
    if env_value:
        return Path(env_value)
    return Path(configured) if configured else DATA_DIR


def load_run_config(experiment_path: Path) -> RunConfig:
    """
    Load experiment.yaml and construct a fully-resolved RunConfig.

    Required keys: data_file, outcome_col, predictor_cols.
    The data file is resolved relative to data_dir (or $EWS_DATA_DIR).
    """
    exp = _load_yaml(experiment_path)

    for key in ("data_file", "outcome_col", "predictor_cols"):
        if key not in exp or not exp.get(key):
            raise ValueError(f"experiment.yaml missing required key: {key}")

    predictor_cols = exp["predictor_cols"]
    if not isinstance(predictor_cols, list):
        raise ValueError("predictor_cols must be a list of column names")

    data_dir = resolve_data_dir(exp.get("data_dir"))

    columns = ColumnsConfig(
        outcome_col=str(exp["outcome_col"]).strip(),
        predictor_cols=[str(c).strip() for c in predictor_cols],
        cluster_col=exp.get("cluster_col"),
        group_cols=list(exp.get("group_cols") or []),
        effect_size_cols=list(exp.get("effect_size_cols") or []),
    )

    stats = StatsConfig(**(exp.get("stats") or {}))
    threshold = ThresholdConfig(**(exp.get("threshold") or {}))

    cfg = RunConfig(
        run_label=str(exp.get("run_label", "base")).strip() or "base",
        data_file_path=data_dir / exp["data_file"],
        columns=columns,
        stats=stats,
        threshold=threshold,
        test_fraction=exp.get("test_fraction"),
    )

    return cfg


def load_synthetic_config(path: Path) -> SyntheticDataConfig:
    """Load synthetic.yaml; the output file is resolved relative to data_dir (or $EWS_DATA_DIR)."""
    data = _load_yaml(path)
    data_dir = resolve_data_dir(data.pop("data_dir", None))

    output_file = data.pop("output_file", None)
    if output_file:
        data["output_file"] = data_dir / output_file

    return SyntheticDataConfig(**data)
