"""Generate the synthetic multi-district student file."""

import argparse
import logging
from pathlib import Path

from application.synthetic import generate_and_save_synthetic_data
from infrastructure.config import SyntheticDataConfig, load_synthetic_config
from infrastructure.constants import SYNTHETIC_FILE
from infrastructure.observability import configure_logging, set_log_context


def main() -> None:
    ap = argparse.ArgumentParser(description="Generate a synthetic grade-7 cohort with graduation outcomes")
    ap.add_argument("--config", default=str(SYNTHETIC_FILE), help="Path to synthetic.yaml (default: configs/synthetic.yaml)")
    ap.add_argument("--output", default=None, help="Output file (.csv or .dta); overrides the config")
    ap.add_argument("--districts", type=int, default=None, help="Number of districts; overrides the config")
    ap.add_argument("--seed", type=int, default=None, help="Base random seed; overrides the config")
    args = ap.parse_args()

    configure_logging()
    set_log_context(stage="synthetic")

    config_path = Path(args.config)
    cfg = load_synthetic_config(config_path) if config_path.exists() else SyntheticDataConfig()

    overrides = {}
    if args.districts is not None:
        overrides["n_districts"] = args.districts
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        cfg = SyntheticDataConfig(**{**cfg.model_dump(), **overrides})

    out_path = generate_and_save_synthetic_data(cfg, Path(args.output) if args.output else None)
    logging.getLogger(__name__).info("Done: %s", out_path)


if __name__ == "__main__":
    main()
