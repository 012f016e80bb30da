"""
Observability: contextual logging for evaluation runs.

Provides:
- Run tag, stage and outcome on every log line
- Console plus rotating file handlers
- Python warnings routed into the log
"""

from infrastructure.observability.logging import (
    clear_stage_context,
    configure_logging,
    get_log_context,
    log_stage,
    make_run_tag,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "set_log_context",
    "log_stage",
    "get_log_context",
    "clear_stage_context",
    "make_run_tag",
]
