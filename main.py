"""
CLI entrypoint for the early-warning model evaluation run.

This script performs the following steps:
- loads .env (optional) and configs/experiment.yaml
- creates a per-run output folder under outputs/
- reads the student analysis file
- fits the configured logistic model (optionally on a stratified training split)
- computes AUC, pseudo R-squared, threshold, confusion matrix, and holdout metrics
- computes naive and cluster-robust coefficient tables and effect sizes
- saves metrics/tables and logs a human-readable summary of results
"""

import argparse
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from application import (
    log_evaluation_summary,
    run_model_evaluation,
    save_data_fingerprint,
    save_evaluation_artifacts,
)
from application.constants import CONFIG_SNAPSHOT_FILENAME, LOG_FILENAME, OUTPUT_ROOT
from infrastructure.config import load_run_config
from infrastructure.constants import EXPERIMENT_FILE, OUTPUT_ROOT_ENV
from infrastructure.io import ensure_dir, ensure_exists, read_table
from infrastructure.observability import clear_stage_context, configure_logging, make_run_tag, set_log_context

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Evaluate an early-warning graduation model")
    p.add_argument(
        "--experiment",
        type=str,
        default=str(EXPERIMENT_FILE),
        help="Path to experiment.yaml (default: configs/experiment.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file with EWS_* overrides (default: .env, skipped if absent)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


def main() -> None:
    args = _parse_args()

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    experiment_path = ensure_exists(Path(args.experiment), "experiment.yaml")
    cfg = load_run_config(experiment_path)

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    holdout = "all" if cfg.test_fraction is None else f"ho{int(round(cfg.test_fraction * 100))}"
    run_id = f"{ts}_{cfg.run_label}_{cfg.columns.outcome_col}_{holdout}"

    output_root = Path(os.environ.get(OUTPUT_ROOT_ENV) or OUTPUT_ROOT)
    run_dir = ensure_dir(output_root / run_id)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )
    set_log_context(run_id_full=run_id, stage="load", outcome=cfg.columns.outcome_col)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    # Save snapshot config
    (run_dir / CONFIG_SNAPSHOT_FILENAME).write_text(
        json.dumps(cfg.model_dump(mode="json"), ensure_ascii=False, indent=2, default=str),
        encoding="utf-8",
    )

    logger.info("Loading data from %s...", cfg.data_file_path)
    df = read_table(cfg.data_file_path)
    logger.info("Data loaded: %d rows, %d columns", df.shape[0], df.shape[1])
    save_data_fingerprint(cfg, df, run_dir)

    try:
        outputs = run_model_evaluation(cfg, df)
    except Exception:
        logger.exception("Evaluation failed")
        raise
    finally:
        clear_stage_context()

    artifact_paths = save_evaluation_artifacts(outputs, run_dir)
    log_evaluation_summary(outputs, artifact_paths)

    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
