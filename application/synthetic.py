"""Synthetic student file generation workflow."""

import logging
from pathlib import Path

import pandas as pd

from domain.synthetic import generate_student_dataset
from infrastructure.config.models import SyntheticDataConfig
from infrastructure.io import write_table

logger = logging.getLogger(__name__)


def log_synthetic_summary(df: pd.DataFrame) -> None:
    """Quick quality checks on the generated file."""
    logger.info(
        "Rows: %d, districts: %d, cooperatives: %d, schools: %d",
        len(df),
        df["sch_g7_lea_id"].nunique(),
        df["coop_name_g7"].nunique(),
        df["sch_g7_code"].nunique(),
    )
    logger.info("On-time graduation rate: %.3f", df["ontime_grad"].mean())
    logger.info(
        "Missing: math=%d, read=%d, absences=%d, male=%d, race=%d",
        df["scale_score_7_math"].isna().sum(),
        df["scale_score_7_read"].isna().sum(),
        df["pct_days_absent_7"].isna().sum(),
        df["male"].isna().sum(),
        df["race_ethnicity"].isna().sum(),
    )
    logger.debug(
        "Mean math score by race:\n%s",
        df.groupby("race_ethnicity")["scale_score_7_math"].mean().round(2),
    )


def generate_and_save_synthetic_data(cfg: SyntheticDataConfig, output_path: Path | None = None) -> Path:
    """
    Convenience wrapper: generate the synthetic student file and write it (CSV or .dta).

    Args:
        cfg: Synthetic data configuration
        output_path: Overrides cfg.output_file

    Returns:
        Path to the written file
    """
    logger.info("Generating synthetic data: %d districts (seed=%d)", cfg.n_districts, cfg.seed)
    df = generate_student_dataset(cfg)
    log_synthetic_summary(df)

    out_path = write_table(df, output_path or cfg.output_file)
    logger.info("Wrote synthetic data to %s", out_path)
    return out_path
