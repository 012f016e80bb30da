"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML, environment)
- Dataset reading/writing (CSV, Excel, Stata)
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    RunConfig,
    StatsConfig,
    SyntheticDataConfig,
    ThresholdConfig,
    load_run_config,
    load_synthetic_config,
)

__all__ = [
    # Configuration (most commonly used)
    "load_run_config",
    "load_synthetic_config",
    "RunConfig",
    "StatsConfig",
    "ThresholdConfig",
    "SyntheticDataConfig",
]
