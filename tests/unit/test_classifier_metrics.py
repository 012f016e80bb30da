import math

import numpy as np
import pandas as pd
import pytest

from domain.errors import InsufficientDataError, InvalidInputError, InvalidModelError, ShapeMismatchError
from domain.evaluation import (
    compute_auc,
    compute_confusion_matrix,
    compute_optimal_threshold,
    compute_pseudo_r_squared,
    default_class_weight,
)

OUTCOMES = [0, 1, 0, 1, 1, 0, 1, 0]
PREDICTIONS = [0.1, 0.7, 0.3, 0.7, 0.9, 0.2, 0.4, 0.5]


def test_auc_perfect_separation() -> None:
    assert compute_auc([0, 0, 0, 1, 1, 1], [0.1, 0.4, 0.35, 0.6, 0.8, 0.9]) == pytest.approx(1.0)


def test_auc_all_ties_is_one_half() -> None:
    assert compute_auc([0, 1, 0, 1], [0.5, 0.5, 0.5, 0.5]) == pytest.approx(0.5)


def test_auc_counts_concordant_pairs() -> None:
    # 3 of the 4 positive/negative pairs are ordered correctly
    assert compute_auc([0, 0, 1, 1], [0.1, 0.4, 0.35, 0.8]) == pytest.approx(0.75)


def test_auc_is_invariant_to_monotonic_transform() -> None:
    p = np.array(PREDICTIONS)
    assert compute_auc(OUTCOMES, np.exp(3 * p)) == pytest.approx(compute_auc(OUTCOMES, p))


def test_auc_is_invariant_to_relabel_and_complement() -> None:
    y = np.array(OUTCOMES)
    p = np.array(PREDICTIONS)
    assert compute_auc(1 - y, 1 - p) == pytest.approx(compute_auc(y, p))


def test_auc_accepts_boolean_and_string_outcomes() -> None:
    p = [0.2, 0.9, 0.3, 0.6]
    assert compute_auc([False, True, False, True], p) == pytest.approx(1.0)
    # "yes" sorts after "no", so it is the positive class
    assert compute_auc(["no", "yes", "no", "yes"], p) == pytest.approx(1.0)


def test_auc_drops_incomplete_pairs() -> None:
    outcomes = pd.Series([0, 1, None, 1, 0])
    predictions = [0.2, 0.8, 0.5, np.nan, 0.1]
    assert compute_auc(outcomes, predictions) == pytest.approx(1.0)


def test_auc_ignores_caller_index_labels() -> None:
    outcomes = pd.Series([0, 0, 1, 1], index=[10, 11, 12, 13])
    predictions = pd.Series([0.1, 0.2, 0.8, 0.9], index=[3, 2, 1, 0])
    assert compute_auc(outcomes, predictions) == pytest.approx(1.0)


def test_auc_single_class_raises() -> None:
    with pytest.raises(InsufficientDataError):
        compute_auc([1, 1, 1], [0.2, 0.3, 0.4])


def test_auc_class_removed_by_missing_prediction_raises() -> None:
    with pytest.raises(InsufficientDataError):
        compute_auc([0, 1, 1], [np.nan, 0.5, 0.6])


def test_auc_length_mismatch_raises() -> None:
    with pytest.raises(ShapeMismatchError):
        compute_auc([0, 1, 0], [0.1, 0.2])


def test_auc_more_than_two_levels_raises() -> None:
    with pytest.raises(InvalidInputError):
        compute_auc([0, 1, 2], [0.1, 0.2, 0.3])


def test_pseudo_r_squared() -> None:
    assert compute_pseudo_r_squared(-50.0, -100.0) == pytest.approx(0.5)
    assert compute_pseudo_r_squared(-100.0, -100.0) == pytest.approx(0.0)


def test_pseudo_r_squared_zero_null_likelihood_raises() -> None:
    with pytest.raises(InvalidModelError):
        compute_pseudo_r_squared(-1.0, 0.0)


def test_default_class_weight_from_prevalence() -> None:
    w_neg, w_pos = default_class_weight(0.25, cost=0.3)
    assert w_neg == pytest.approx(0.75 / 0.3)
    assert w_pos == pytest.approx(0.25)


def test_default_class_weight_rejects_non_positive_cost() -> None:
    with pytest.raises(InvalidInputError):
        default_class_weight(0.5, cost=0.0)


def _roc_point(cm: pd.DataFrame) -> tuple[float, float]:
    tn, fn = cm.loc["Pred FALSE", "Obs FALSE"], cm.loc["Pred FALSE", "Obs TRUE"]
    fp, tp = cm.loc["Pred TRUE", "Obs FALSE"], cm.loc["Pred TRUE", "Obs TRUE"]
    return fp / (fp + tn), tp / (tp + fn)


def test_optimal_threshold_perfect_separation_hits_top_left() -> None:
    outcomes, predictions = [0, 0, 0, 1, 1, 1], [0.1, 0.4, 0.35, 0.6, 0.8, 0.9]
    threshold = compute_optimal_threshold(outcomes, predictions)

    # Highest negative score: everything strictly above it is positive
    assert threshold == pytest.approx(0.4)
    assert _roc_point(compute_confusion_matrix(outcomes, predictions, threshold)) == (0.0, 1.0)


def test_optimal_threshold_ties_resolve_to_smallest() -> None:
    # Candidates 0.2 (fpr=.5, tpr=1) and 0.6 (fpr=0, tpr=.5) are equally distant
    threshold = compute_optimal_threshold([0, 1, 0, 1], [0.2, 0.4, 0.6, 0.8], class_weight=(1.0, 1.0))
    assert threshold == pytest.approx(0.2)


def test_optimal_threshold_follows_class_weights() -> None:
    outcomes, predictions = [0, 1, 0, 1], [0.2, 0.4, 0.6, 0.8]
    assert compute_optimal_threshold(outcomes, predictions, class_weight=(1.0, 3.0)) == pytest.approx(0.2)
    assert compute_optimal_threshold(outcomes, predictions, class_weight=(3.0, 1.0)) == pytest.approx(0.6)


@pytest.mark.parametrize("class_weight", [None, (1.0, 1.0), (1.0, 4.0), (4.0, 1.0)])
def test_confusion_matrix_at_optimal_threshold_is_the_best_roc_point(class_weight: tuple | None) -> None:
    w_neg, w_pos = class_weight or default_class_weight(np.mean(OUTCOMES))

    def distance(cut: float) -> float:
        fpr, tpr = _roc_point(compute_confusion_matrix(OUTCOMES, PREDICTIONS, cut))
        return w_neg * fpr**2 + w_pos * (1 - tpr) ** 2

    threshold = compute_optimal_threshold(OUTCOMES, PREDICTIONS, class_weight=class_weight)
    best = min(distance(cut) for cut in set(PREDICTIONS))

    assert distance(threshold) == pytest.approx(best)


def test_optimal_threshold_is_an_observed_prediction() -> None:
    threshold = compute_optimal_threshold(OUTCOMES, PREDICTIONS)
    assert threshold in PREDICTIONS


def test_optimal_threshold_single_class_raises() -> None:
    with pytest.raises(InsufficientDataError):
        compute_optimal_threshold([0, 0, 0], [0.1, 0.2, 0.3])


def test_confusion_matrix_one_of_each() -> None:
    cm = compute_confusion_matrix(outcomes=[0, 0, 1, 1], predictions=[0.2, 0.6, 0.3, 0.9], threshold=0.5)

    assert list(cm.index) == ["Pred FALSE", "Pred TRUE"]
    assert list(cm.columns) == ["Obs FALSE", "Obs TRUE", "class.error"]
    assert cm.loc["Pred FALSE", "Obs FALSE"] == 1
    assert cm.loc["Pred FALSE", "Obs TRUE"] == 1
    assert cm.loc["Pred TRUE", "Obs FALSE"] == 1
    assert cm.loc["Pred TRUE", "Obs TRUE"] == 1
    assert cm.loc["Pred FALSE", "class.error"] == pytest.approx(0.5)
    assert cm.loc["Pred TRUE", "class.error"] == pytest.approx(0.5)


def test_confusion_matrix_defaults_to_mean_prediction() -> None:
    cm = compute_confusion_matrix([0, 0, 1, 1], [0.1, 0.2, 0.7, 0.8])

    assert cm.loc["Pred FALSE", "Obs FALSE"] == 2
    assert cm.loc["Pred TRUE", "Obs TRUE"] == 2
    assert cm["class.error"].tolist() == [0.0, 0.0]


def test_confusion_matrix_threshold_is_strict() -> None:
    cm = compute_confusion_matrix([0, 1], [0.5, 0.6], threshold=0.5)

    assert cm.loc["Pred FALSE", "Obs FALSE"] == 1
    assert cm.loc["Pred TRUE", "Obs FALSE"] == 0


def test_confusion_matrix_counts_only_complete_pairs() -> None:
    cm = compute_confusion_matrix(
        pd.Series([0, 1, None, 1, 0, 1]),
        [0.3, 0.9, 0.4, np.nan, 0.6, 0.2],
        threshold=0.5,
    )
    assert int(cm[["Obs FALSE", "Obs TRUE"]].to_numpy().sum()) == 4


def test_confusion_matrix_zero_denominator_gives_nan() -> None:
    cm = compute_confusion_matrix([1, 1], [0.2, 0.9], threshold=0.5)

    assert math.isnan(cm.loc["Pred FALSE", "class.error"])
    assert cm.loc["Pred TRUE", "class.error"] == pytest.approx(0.5)


def test_confusion_matrix_errors() -> None:
    with pytest.raises(ShapeMismatchError):
        compute_confusion_matrix([0, 1], [0.5])
    with pytest.raises(InsufficientDataError):
        compute_confusion_matrix([None, 1], [0.5, np.nan])


def test_confusion_matrix_non_numeric_outcome_levels() -> None:
    with pytest.raises(InsufficientDataError):
        compute_confusion_matrix(["yes", "yes"], [0.2, 0.9], 0.5)
    with pytest.raises(InvalidInputError):
        compute_confusion_matrix(["a", "b", "c"], [0.2, 0.5, 0.9], 0.5)

    cm = compute_confusion_matrix(["no", "yes"], [0.2, 0.9], 0.5)
    assert cm.loc["Pred TRUE", "Obs TRUE"] == 1
