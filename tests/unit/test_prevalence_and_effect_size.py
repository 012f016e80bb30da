import math

import numpy as np
import pandas as pd
import pytest

from domain.errors import InsufficientDataError, InvalidInputError, ShapeMismatchError
from domain.evaluation import as_logical, compute_prevalence, compute_standardized_mean_diff, zero_missing


def test_prevalence_of_second_level() -> None:
    assert compute_prevalence([0, 0, 0, 1]) == pytest.approx(0.25)


@pytest.mark.parametrize("n0,n1", [(1, 1), (3, 1), (2, 5), (10, 7)])
def test_prevalence_equals_share_of_positives(n0: int, n1: int) -> None:
    outcomes = [0] * n0 + [1] * n1
    assert compute_prevalence(outcomes) == pytest.approx(n1 / (n0 + n1))


def test_prevalence_ignores_missing() -> None:
    assert compute_prevalence(pd.Series([0, 1, None, 1])) == pytest.approx(2 / 3)


def test_prevalence_uses_sort_order_for_labels() -> None:
    assert compute_prevalence([True, False, False, False]) == pytest.approx(0.25)
    assert compute_prevalence(["grad", "nongrad", "grad", "grad"]) == pytest.approx(0.25)


def test_prevalence_requires_exactly_two_levels() -> None:
    with pytest.raises(InvalidInputError):
        compute_prevalence([1, 1, 1])
    with pytest.raises(InvalidInputError):
        compute_prevalence([0, 1, 2])


def test_as_logical_numeric_and_labels() -> None:
    assert as_logical([0, 2, 0]).tolist() == [False, True, False]
    assert as_logical(["N", "Y", "Y"]).tolist() == [False, True, True]

    coerced = as_logical(pd.Series([1.0, None, 0.0]))
    assert coerced.isna().tolist() == [False, True, False]


def test_as_logical_rejects_many_labels() -> None:
    with pytest.raises(InvalidInputError):
        as_logical(["a", "b", "c"])


def test_as_logical_single_label_raises() -> None:
    with pytest.raises(InsufficientDataError):
        as_logical(["Y", "Y", None])


def test_zero_missing() -> None:
    assert zero_missing([1.0, np.nan, 3.0]).tolist() == [1.0, 0.0, 3.0]


def test_standardized_mean_diff() -> None:
    values = [1, 2, 3, 4, 5, 6]
    groups = [0, 0, 0, 1, 1, 1]
    expected = 3 / np.std(values, ddof=1)
    assert compute_standardized_mean_diff(values, groups) == pytest.approx(expected)


def test_standardized_mean_diff_sign_follows_label_order() -> None:
    values = [1, 2, 3, 4, 5, 6]
    assert compute_standardized_mean_diff(values, ["F", "F", "F", "M", "M", "M"]) > 0
    assert compute_standardized_mean_diff(values, ["M", "M", "M", "F", "F", "F"]) < 0


def test_standardized_mean_diff_missing_values() -> None:
    values = [1, 2, 3, 4, 5, 6, np.nan]
    groups = [0, 0, 0, 1, 1, 1, 1]
    expected = 3 / np.std([1, 2, 3, 4, 5, 6], ddof=1)

    assert compute_standardized_mean_diff(values, groups) == pytest.approx(expected)
    assert math.isnan(compute_standardized_mean_diff(values, groups, ignore_missing=False))


def test_standardized_mean_diff_drops_unlabelled_rows() -> None:
    values = [1, 2, 3, 4, 5, 6, 100]
    groups = pd.Series([0, 0, 0, 1, 1, 1, None])
    expected = 3 / np.std([1, 2, 3, 4, 5, 6], ddof=1)
    assert compute_standardized_mean_diff(values, groups) == pytest.approx(expected)


def test_standardized_mean_diff_errors() -> None:
    with pytest.raises(ShapeMismatchError):
        compute_standardized_mean_diff([1, 2, 3], [0, 1])
    with pytest.raises(InvalidInputError):
        compute_standardized_mean_diff([1, 2, 3], [0, 1, 2])
    with pytest.raises(InsufficientDataError):
        compute_standardized_mean_diff([2, 2, 2, 2], [0, 0, 1, 1])
    with pytest.raises(InsufficientDataError):
        compute_standardized_mean_diff([1, 2, np.nan, np.nan], [0, 0, 1, 1])
