"""Accuracy statistics for a binary classifier's probability output."""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import roc_auc_score

from domain.errors import InsufficientDataError, InvalidInputError, InvalidModelError
from domain.evaluation.inputs import (
    as_logical,
    binary_levels,
    paired_complete_cases,
    positive_indicator,
)

ArrayLike = Sequence | np.ndarray | pd.Series

# Relative cost of a false negative used by the "closest top-left" weighting
DEFAULT_THRESHOLD_COST = 0.3

CONFUSION_ROWS = ["Pred FALSE", "Pred TRUE"]
CONFUSION_COLUMNS = ["Obs FALSE", "Obs TRUE", "class.error"]


def _two_class_pairs(outcomes: ArrayLike, predictions: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Drop missing pairs and return (positive mask, predictions) for a two-class outcome."""
    y, p = paired_complete_cases(outcomes, predictions)
    levels = binary_levels(y)

    if len(levels) > 2:
        raise InvalidInputError(f"Outcome must have two distinct values, got {levels}")
    if len(levels) < 2:
        raise InsufficientDataError(
            f"Both outcome classes need at least one case after dropping missing values (found levels {levels})"
        )

    return positive_indicator(y, levels), p


def compute_auc(outcomes: ArrayLike, predictions: ArrayLike) -> float:
    """
    Area under the ROC curve.

    Equals the probability that a randomly chosen positive case is scored above a
    randomly chosen negative case, with ties counting one half. The positive class
    is the second distinct outcome value in sort order.

    Args:
        outcomes: Observed binary outcomes (0/1, bool or any two-valued vector)
        predictions: Predicted probabilities, same length and order

    Returns:
        AUC in [0, 1]

    Raises:
        ShapeMismatchError: If the vectors differ in length
        InsufficientDataError: If either class is empty after dropping missing pairs
        InvalidInputError: If the outcome has more than two distinct values
    """
    positive, p = _two_class_pairs(outcomes, predictions)
    return float(roc_auc_score(positive, p))


def compute_pseudo_r_squared(log_likelihood_full: float, log_likelihood_null: float) -> float:
    """McFadden pseudo R-squared: 1 - ll_full / ll_null."""
    if log_likelihood_null == 0:
        raise InvalidModelError("Null model log-likelihood is zero; pseudo R-squared is undefined")
    return float(1 - log_likelihood_full / log_likelihood_null)


def default_class_weight(prevalence: float, cost: float = DEFAULT_THRESHOLD_COST) -> tuple[float, float]:
    """
    Weights (w_neg, w_pos) derived from positive-class prevalence.

    w_pos is the prevalence and w_neg is (1 - prevalence) / cost, which reproduces
    the weighted "closest to top-left" rule with weights (cost, prevalence).
    """
    if cost <= 0:
        raise InvalidInputError(f"cost must be positive, got {cost}")
    return (1 - prevalence) / cost, prevalence


def compute_optimal_threshold(
    outcomes: ArrayLike,
    predictions: ArrayLike,
    class_weight: tuple[float, float] | None = None,
    cost: float = DEFAULT_THRESHOLD_COST,
) -> float:
    """
    Prediction cutoff closest to the ROC top-left corner (0, 1).

    Minimizes w_neg * (1 - specificity)^2 + w_pos * (1 - sensitivity)^2 over the
    distinct observed prediction values. A prediction strictly above the
    candidate counts as positive, the same rule compute_confusion_matrix applies,
    so tabulating at the returned cutoff reproduces the selected ROC point.
    Ties resolve to the smallest threshold.

    Args:
        outcomes: Observed binary outcomes
        predictions: Predicted probabilities
        class_weight: Optional (w_neg, w_pos); defaults to prevalence-based weights
        cost: Relative false-negative cost used for the default weights

    Returns:
        The selected threshold (one of the observed prediction values)
    """
    positive, p = _two_class_pairs(outcomes, predictions)

    if class_weight is None:
        w_neg, w_pos = default_class_weight(float(positive.mean()), cost)
    else:
        w_neg, w_pos = class_weight

    fpr, tpr, thresholds = strict_roc_points(positive, p)
    distance = w_neg * fpr**2 + w_pos * (1 - tpr) ** 2

    # Candidates are ascending, so argmin returns the smallest tied threshold
    return float(thresholds[np.argmin(distance)])


def strict_roc_points(positive: np.ndarray, predictions: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    ROC coordinates at every distinct prediction value, classifying ``prediction > t`` as positive.

    Returns:
        Tuple of (fpr, tpr, thresholds) with thresholds in ascending order
    """
    thresholds = np.unique(predictions)
    pos_scores = np.sort(predictions[positive])
    neg_scores = np.sort(predictions[~positive])

    # Scores strictly above t = total minus those at or below t
    tp = len(pos_scores) - np.searchsorted(pos_scores, thresholds, side="right")
    fp = len(neg_scores) - np.searchsorted(neg_scores, thresholds, side="right")
    return fp / len(neg_scores), tp / len(pos_scores), thresholds


def compute_confusion_matrix(
    outcomes: ArrayLike,
    predictions: ArrayLike,
    threshold: float | None = None,
) -> pd.DataFrame:
    """
    Predicted vs observed counts plus a per-row class error column.

    A prediction is positive when strictly greater than the threshold; the
    threshold defaults to the mean prediction.

    Rows are ``Pred FALSE``/``Pred TRUE``; columns ``Obs FALSE``/``Obs TRUE`` and
    ``class.error``. The error for ``Pred FALSE`` is 1 - TN / (TN + FP) and for
    ``Pred TRUE`` is 1 - TP / (TP + FN); NaN when the denominator is zero.

    Raises:
        ShapeMismatchError: If the vectors differ in length
        InsufficientDataError: If no complete pairs remain, or a non-numeric
            outcome has a single level
        InvalidInputError: If a non-numeric outcome has more than two levels
    """
    y, p = paired_complete_cases(outcomes, predictions)
    if len(p) == 0:
        raise InsufficientDataError("No complete (outcome, prediction) pairs to tabulate")

    cut = float(p.mean()) if threshold is None else float(threshold)
    predicted = p > cut
    observed = as_logical(y).to_numpy(dtype=bool)

    tn = int(np.sum(~predicted & ~observed))
    fn = int(np.sum(~predicted & observed))
    fp = int(np.sum(predicted & ~observed))
    tp = int(np.sum(predicted & observed))

    neg_total = tn + fp
    pos_total = tp + fn
    err_neg = 1 - tn / neg_total if neg_total else float("nan")
    err_pos = 1 - tp / pos_total if pos_total else float("nan")

    return pd.DataFrame(
        [[tn, fn, err_neg], [fp, tp, err_pos]],
        index=CONFUSION_ROWS,
        columns=CONFUSION_COLUMNS,
    )
