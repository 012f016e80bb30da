"""Cluster-robust covariance for regression coefficients."""

from collections.abc import Callable, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from domain.errors import DegenerateClusterError, InvalidInputError, ShapeMismatchError

SandwichFn = Callable[[np.ndarray, np.ndarray, int], np.ndarray]


def sandwich_estimator(bread: np.ndarray, meat: np.ndarray, n_obs: int) -> np.ndarray:
    """
    Combine a naive covariance ("bread") with a meat matrix.

    ``bread`` is the model's non-robust covariance, i.e. the inverse of the
    negative Hessian of the log-likelihood (``cov_params()`` of a statsmodels
    MLE fit). The classic formulation scales the bread by n, so
    (1/n) * (n B) M (n B) reduces to n * B M B.
    """
    return n_obs * bread @ meat @ bread


def compute_cluster_robust_vcov(
    score_matrix: np.ndarray | pd.DataFrame,
    cluster_ids: Sequence | np.ndarray | pd.Series,
    rank: int,
    n_obs: int,
    *,
    bread: np.ndarray | pd.DataFrame,
    param_names: Sequence[str] | None = None,
    sandwich_fn: SandwichFn = sandwich_estimator,
) -> pd.DataFrame:
    """
    Degrees-of-freedom adjusted, cluster-robust covariance matrix.

    Args:
        score_matrix: Per-observation score contributions (N rows, K columns)
        cluster_ids: Cluster identifier per observation (e.g. school or district)
        rank: Number of estimated parameters K
        n_obs: Number of observations N
        bread: Naive K x K covariance of the fitted model
        param_names: Optional labels for the result (defaults to score columns)
        sandwich_fn: Sandwich combiner taking (bread, meat, n_obs)

    Returns:
        K x K covariance DataFrame labelled by parameter

    Raises:
        ShapeMismatchError: If cluster ids, scores and bread disagree in shape
        InvalidInputError: If any cluster id is missing
        DegenerateClusterError: If there is at most one cluster or N <= K
    """
    if isinstance(score_matrix, pd.DataFrame):
        labels = list(param_names) if param_names is not None else [str(c) for c in score_matrix.columns]
        scores = score_matrix.to_numpy(dtype=float)
    else:
        scores = np.asarray(score_matrix, dtype=float)
        if scores.ndim == 1:
            scores = scores.reshape(-1, 1)
        labels = list(param_names) if param_names is not None else [str(i) for i in range(scores.shape[1])]

    clusters = pd.Series(cluster_ids).reset_index(drop=True)
    if len(clusters) != scores.shape[0]:
        raise ShapeMismatchError(f"{len(clusters)} cluster ids for {scores.shape[0]} score rows")
    if clusters.isna().any():
        raise InvalidInputError("cluster_ids contains missing values")

    bread_arr = np.asarray(bread, dtype=float)
    k_cols = scores.shape[1]
    if bread_arr.shape != (k_cols, k_cols):
        raise ShapeMismatchError(f"bread has shape {bread_arr.shape}, expected {(k_cols, k_cols)}")
    if len(labels) != k_cols:
        raise ShapeMismatchError(f"{len(labels)} parameter names for {k_cols} score columns")

    n_clusters = int(clusters.astype(str).nunique())
    if n_clusters <= 1:
        raise DegenerateClusterError(f"Need at least two clusters, got {n_clusters}")
    if n_obs <= rank:
        raise DegenerateClusterError(f"n_obs ({n_obs}) must exceed rank ({rank})")

    dfc = (n_clusters / (n_clusters - 1)) * ((n_obs - 1) / (n_obs - rank))

    # Cluster sums of the score contributions (M x K)
    u = pd.DataFrame(scores).groupby(clusters.astype(str).to_numpy()).sum().to_numpy()
    meat = u.T @ u / n_obs

    vcov = dfc * sandwich_fn(bread_arr, meat, n_obs)
    return pd.DataFrame(vcov, index=labels, columns=labels)


def coefficient_table(params: pd.Series, vcov: pd.DataFrame) -> pd.DataFrame:
    """Estimates with standard errors, z statistics and two-sided p-values for a given covariance."""
    vcov = vcov.loc[params.index, params.index]
    std_error = np.sqrt(np.diag(vcov.to_numpy()))
    z_value = params.to_numpy() / std_error
    p_value = 2 * stats.norm.sf(np.abs(z_value))

    return pd.DataFrame(
        {
            "estimate": params.to_numpy(),
            "std_error": std_error,
            "z_value": z_value,
            "p_value": p_value,
        },
        index=params.index,
    )
