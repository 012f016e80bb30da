"""Bootstrap confidence interval computation."""

from collections.abc import Callable

import numpy as np

from domain.errors import EvaluationError, InsufficientDataError


def bootstrap_ci(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    stat_fn: Callable[[np.ndarray, np.ndarray], float],
    n_boot: int,
    alpha: float,
    seed: int,
) -> tuple[float, float]:
    """
    Non-parametric bootstrap CI for a statistic (e.g., AUC).

    Resamples on which ``stat_fn`` raises an EvaluationError (for instance a
    draw containing a single outcome class) are left out of the percentiles.

    Args:
        y_true: Observed outcomes
        y_pred: Predicted probabilities
        stat_fn: Function that computes a statistic from (y_true, y_pred)
        n_boot: Number of bootstrap samples
        alpha: Significance level (e.g., 0.05 for 95% CI)
        seed: Random seed for reproducibility

    Returns:
        Tuple of (lower, upper) confidence interval bounds
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)

    rng = np.random.default_rng(seed)
    n = len(y_true)
    idx = np.arange(n)
    stats = np.full(n_boot, np.nan, dtype=float)

    for b in range(n_boot):
        sample_idx = rng.choice(idx, size=n, replace=True)
        try:
            stats[b] = stat_fn(y_true[sample_idx], y_pred[sample_idx])
        except EvaluationError:
            continue

    if np.isnan(stats).all():
        raise InsufficientDataError("Every bootstrap resample was degenerate")

    lower = float(np.nanpercentile(stats, 100 * (alpha / 2)))
    upper = float(np.nanpercentile(stats, 100 * (1 - alpha / 2)))
    return lower, upper
