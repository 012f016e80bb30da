"""Standardized mean difference between two groups."""

from collections.abc import Sequence

import numpy as np
import pandas as pd

from domain.errors import InsufficientDataError, InvalidInputError, ShapeMismatchError
from domain.evaluation.inputs import binary_levels


def compute_standardized_mean_diff(
    values: Sequence | np.ndarray | pd.Series,
    group_labels: Sequence | np.ndarray | pd.Series,
    ignore_missing: bool = True,
) -> float:
    """
    (mean(group1) - mean(group0)) / sd(values).

    group1 is the second label in sort order. The denominator is the sample
    standard deviation of every value with a non-missing label, not a
    variance-weighted pooled SD.

    Args:
        values: Continuous variable (e.g. grade-7 math scale score)
        group_labels: Two-level grouping (e.g. ELL flag)
        ignore_missing: Drop missing values; when False any missing value yields NaN

    Returns:
        Standardized mean difference
    """
    x = pd.to_numeric(pd.Series(values).reset_index(drop=True), errors="coerce")
    g = pd.Series(group_labels).reset_index(drop=True)

    if len(x) != len(g):
        raise ShapeMismatchError(f"values has {len(x)} entries but group_labels has {len(g)}")

    levels = binary_levels(g)
    if len(levels) != 2:
        raise InvalidInputError(f"group_labels must have exactly two distinct values, got {levels}")

    labelled = g.notna()
    x, g = x[labelled], g[labelled]

    if not ignore_missing and x.isna().any():
        return float("nan")
    x_ok = x.notna()
    x, g = x[x_ok], g[x_ok]

    group0 = x[g == levels[0]]
    group1 = x[g == levels[1]]
    if group0.empty or group1.empty:
        raise InsufficientDataError(f"Both groups {levels} need at least one non-missing value")

    sd = float(x.std(ddof=1)) if len(x) > 1 else float("nan")
    if not np.isfinite(sd) or sd == 0:
        raise InsufficientDataError("Standard deviation of values is zero or undefined")

    return float((group1.mean() - group0.mean()) / sd)
