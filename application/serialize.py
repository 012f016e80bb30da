"""Evaluation artifact serialization."""

import json
import logging
import math
from pathlib import Path

import numpy as np
import pandas as pd

from application.constants import (
    COEFFICIENTS_FILENAME,
    CONFUSION_FILENAME,
    DATA_FINGERPRINT_FILENAME,
    EFFECT_SIZES_FILENAME,
    HOLDOUT_CONFUSION_FILENAME,
    METRICS_FILENAME,
)
from application.evaluation import EvaluationOutputs
from infrastructure.config import RunConfig

logger = logging.getLogger(__name__)


def _json_safe(value: object) -> object:
    """Recursively replace NaN/inf floats with None so the output is strict JSON."""
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, (float, np.floating)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, np.integer):
        return int(value)
    return value


def save_evaluation_artifacts(outputs: EvaluationOutputs, run_dir: Path) -> dict[str, Path]:
    """
    Write metrics JSON and the confusion/coefficient/effect-size tables as CSV.

    Returns:
        Mapping of artifact name to written path
    """
    run_dir.mkdir(parents=True, exist_ok=True)
    paths: dict[str, Path] = {}

    metrics_path = run_dir / METRICS_FILENAME
    with metrics_path.open("w", encoding="utf-8") as f:
        json.dump(_json_safe(outputs.metrics), f, ensure_ascii=False, indent=2, allow_nan=False)
    paths["Metrics JSON"] = metrics_path

    outputs.cm_df.to_csv(run_dir / CONFUSION_FILENAME)
    paths["Confusion matrix"] = run_dir / CONFUSION_FILENAME

    if outputs.holdout_cm_df is not None:
        outputs.holdout_cm_df.to_csv(run_dir / HOLDOUT_CONFUSION_FILENAME)
        paths["Holdout confusion matrix"] = run_dir / HOLDOUT_CONFUSION_FILENAME

    outputs.coef_df.to_csv(run_dir / COEFFICIENTS_FILENAME, index_label="term")
    paths["Coefficients"] = run_dir / COEFFICIENTS_FILENAME

    if outputs.effect_df is not None:
        outputs.effect_df.to_csv(run_dir / EFFECT_SIZES_FILENAME, index=False)
        paths["Effect sizes"] = run_dir / EFFECT_SIZES_FILENAME

    logger.info("Saved %d evaluation artifacts to %s", len(paths), run_dir)
    return paths


def save_data_fingerprint(cfg: RunConfig, df: pd.DataFrame, run_dir: Path) -> Path:
    """Record which file, rows and columns the run used."""
    path = run_dir / DATA_FINGERPRINT_FILENAME
    path.write_text(
        json.dumps(
            {
                "data_file": str(cfg.data_file_path),
                "rows": int(df.shape[0]),
                "columns": list(map(str, df.columns)),
                "outcome_missing": int(df[cfg.columns.outcome_col].isna().sum()),
            },
            ensure_ascii=False,
            indent=2,
        ),
        encoding="utf-8",
    )
    return path
