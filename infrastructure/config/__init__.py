"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main evaluation run configuration
- ThresholdConfig / StatsConfig: statistics settings
- SyntheticDataConfig: synthetic student file parameters
- Environment variable overrides for the data directory

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    load_run_config,
    load_synthetic_config,
    resolve_data_dir,
)
from infrastructure.config.models import (
    # Column mapping
    ColumnsConfig,
    # Main config
    RunConfig,
    # Stats config
    StatsConfig,
    # Synthetic data
    SyntheticDataConfig,
    ThresholdConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Data columns
    "ColumnsConfig",
    # Stats
    "StatsConfig",
    "ThresholdConfig",
    # Synthetic data
    "SyntheticDataConfig",
    "load_synthetic_config",
    "resolve_data_dir",
]
