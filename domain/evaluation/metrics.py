"""Binary classifier metrics computation with confidence intervals."""

import numpy as np
import pandas as pd

from domain.evaluation.bootstrap import bootstrap_ci
from domain.evaluation.classifier import (
    compute_auc,
    compute_confusion_matrix,
    compute_optimal_threshold,
    compute_pseudo_r_squared,
)
from domain.evaluation.inputs import paired_complete_cases
from domain.evaluation.prevalence import compute_prevalence
from domain.schemas import ModelSummary
from infrastructure.config.models import StatsConfig, ThresholdConfig


def resolve_confusion_threshold(
    threshold_cfg: ThresholdConfig,
    predictions: np.ndarray,
    optimal_threshold: float,
) -> float:
    """Translate the configured confusion threshold ('mean', 'optimal' or a number) into a cutoff."""
    choice = threshold_cfg.confusion_threshold
    if choice == "mean":
        return float(np.mean(predictions))
    if choice == "optimal":
        return float(optimal_threshold)
    return float(choice)


def compute_classifier_metrics(
    summary: ModelSummary,
    stats_cfg: StatsConfig,
    threshold_cfg: ThresholdConfig,
    optimal_threshold: float | None = None,
) -> tuple[dict, pd.DataFrame]:
    """
    Compute AUC (with bootstrap CI), pseudo R-squared, prevalence, threshold and confusion matrix.

    Args:
        summary: Predictions/outcomes (and optionally likelihoods) of a fitted model
        stats_cfg: Statistics configuration (seed, n_boot, alpha)
        threshold_cfg: Threshold selection configuration
        optimal_threshold: Cutoff already chosen elsewhere (e.g. on the training
            rows when scoring a holdout); when None it is optimized on ``summary``

    Returns:
        Tuple of (metrics dict, confusion_matrix DataFrame)
    """
    y, p = paired_complete_cases(summary.outcomes, summary.predictions)

    auc = compute_auc(y, p)
    auc_ci_low, auc_ci_high = bootstrap_ci(
        y_true=y.to_numpy(),
        y_pred=p,
        stat_fn=compute_auc,
        n_boot=stats_cfg.n_boot,
        alpha=stats_cfg.alpha,
        seed=stats_cfg.seed,
    )

    pseudo_r2 = None
    if summary.log_likelihood is not None and summary.log_likelihood_null is not None:
        pseudo_r2 = compute_pseudo_r_squared(summary.log_likelihood, summary.log_likelihood_null)

    prevalence = compute_prevalence(y)
    if optimal_threshold is None:
        optimal = compute_optimal_threshold(
            y,
            p,
            class_weight=threshold_cfg.class_weight,
            cost=threshold_cfg.cost,
        )
    else:
        optimal = float(optimal_threshold)
    cut = resolve_confusion_threshold(threshold_cfg, p, optimal)
    cm_df = compute_confusion_matrix(y, p, threshold=cut)

    tn, fn = int(cm_df.loc["Pred FALSE", "Obs FALSE"]), int(cm_df.loc["Pred FALSE", "Obs TRUE"])
    fp, tp = int(cm_df.loc["Pred TRUE", "Obs FALSE"]), int(cm_df.loc["Pred TRUE", "Obs TRUE"])
    n = tn + fn + fp + tp

    metrics = {
        "n_obs": n,
        "auc": auc,
        "auc_ci_95": [auc_ci_low, auc_ci_high],
        "pseudo_r_squared": pseudo_r2,
        "prevalence": prevalence,
        "optimal_threshold": optimal,
        "confusion_threshold": cut,
        "confusion_matrix": cm_df[["Obs FALSE", "Obs TRUE"]].to_numpy().tolist(),
        "class_error": cm_df["class.error"].tolist(),
        "sensitivity": tp / (tp + fn) if (tp + fn) else None,
        "specificity": tn / (tn + fp) if (tn + fp) else None,
        "accuracy": (tp + tn) / n,
    }

    return metrics, cm_df
