"""
Logging setup with contextvars-based run metadata.

Every record carries the short run tag, the evaluation stage (fit, evaluate,
coefficients, ...) and the outcome being modelled. Python warnings (e.g.
statsmodels convergence or separation warnings) are routed into the same
handlers so they land in the run log.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")
cv_stage = contextvars.ContextVar("stage", default="-")
cv_outcome = contextvars.ContextVar("outcome", default="-")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s s=%(stage)s y=%(outcome)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s s=%(stage)s y=%(outcome)s | %(message)s"

# Third-party loggers that are chatty at INFO/DEBUG
QUIET_LOGGERS = ("matplotlib", "numexpr", "statsmodels", "PIL")


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short, stable BLAKE2s tag for a run id (printed on every line instead of the full id)."""
    return hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()[:length]


class ContextInjectFilter(logging.Filter):
    """Copy the current run/stage/outcome context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.stage = cv_stage.get() or "-"
        record.outcome = cv_outcome.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    stage: str | None = None,
    outcome: str | None = None,
) -> None:
    """Update any subset of the logging context; None leaves a field unchanged."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))
    if stage is not None:
        cv_stage.set(str(stage))
    if outcome is not None:
        cv_outcome.set(str(outcome))


@contextmanager
def log_stage(stage: str) -> Iterator[None]:
    """Label log lines inside the block with ``stage``, restoring the previous stage on exit."""
    token = cv_stage.set(stage)
    try:
        yield
    finally:
        cv_stage.reset(token)


def get_log_context() -> dict[str, str]:
    """Current context as a dict, e.g. for stamping JSON artifacts."""
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "stage": str(cv_stage.get() or "-"),
        "outcome": str(cv_outcome.get() or "-"),
    }


def clear_stage_context() -> None:
    """Reset stage context to default (keep run info)."""
    cv_stage.set("-")


def _make_handler(handler: logging.Handler, level: int, fmt: str, datefmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(ContextInjectFilter())
    return handler


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> None:
    """
    Configure root logging: console always, plus a rotating file when ``log_file`` is given.

    Safe to call more than once; existing root handlers are replaced.

    Args:
        log_file: Path to the run log
        console_level: Minimum level for console output
        file_level: Minimum level for file output
        max_bytes: Max log file size before rotation
        backup_count: Number of rotated files to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers enforce levels

    root.addHandler(_make_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S"))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        root.addHandler(_make_handler(fh, file_level, FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # ConvergenceWarning / PerfectSeparationWarning end up in the run log
    logging.captureWarnings(True)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        log_file if log_file is not None else "None",
    )
