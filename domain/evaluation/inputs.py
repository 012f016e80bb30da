"""Shared input conventions: pairing, missing values and binary levels."""

from collections.abc import Sequence

import numpy as np
import pandas as pd

from domain.errors import InsufficientDataError, InvalidInputError, ShapeMismatchError


def _as_series(values: Sequence | np.ndarray | pd.Series) -> pd.Series:
    # Positional index so pairing never aligns on caller labels
    if isinstance(values, pd.Series):
        return values.reset_index(drop=True)
    return pd.Series(values)


def paired_complete_cases(
    outcomes: Sequence | np.ndarray | pd.Series,
    predictions: Sequence | np.ndarray | pd.Series,
) -> tuple[pd.Series, np.ndarray]:
    """
    Check lengths and drop entries where either input is missing.

    Args:
        outcomes: Observed outcome vector
        predictions: Predicted probabilities, same length and order as outcomes

    Returns:
        Tuple of (outcomes Series, predictions float array) with missing pairs removed

    Raises:
        ShapeMismatchError: If the two vectors differ in length
    """
    y = _as_series(outcomes)
    p = pd.to_numeric(_as_series(predictions), errors="coerce")

    if len(y) != len(p):
        raise ShapeMismatchError(f"outcomes has {len(y)} entries but predictions has {len(p)}")

    keep = y.notna() & p.notna()
    return y[keep].reset_index(drop=True), p[keep].to_numpy(dtype=float)


def binary_levels(values: Sequence | np.ndarray | pd.Series) -> list:
    """Sorted distinct non-missing values (table order)."""
    s = _as_series(values).dropna()
    return sorted(pd.unique(s).tolist())


def positive_indicator(outcomes: pd.Series, levels: list) -> np.ndarray:
    """Boolean mask of observations equal to the second (positive) level."""
    return (outcomes == levels[1]).to_numpy(dtype=bool)


def as_logical(values: Sequence | np.ndarray | pd.Series) -> pd.Series:
    """
    Coerce an outcome vector to booleans.

    Numeric and boolean inputs follow the usual truthiness rule (non-zero is True).
    Other inputs must be two-valued; the second sorted value maps to True.
    Missing entries stay missing.

    Raises:
        InsufficientDataError: If a non-numeric input has a single level (no way to tell which is positive)
        InvalidInputError: If a non-numeric input has more than two levels
    """
    s = _as_series(values)
    non_missing = s.dropna()

    kind = pd.api.types.infer_dtype(non_missing, skipna=True)
    if kind in {"boolean", "integer", "floating", "mixed-integer-float", "empty"}:
        logical = non_missing.astype(float) != 0
    else:
        levels = binary_levels(non_missing)
        if len(levels) > 2:
            raise InvalidInputError(
                f"Cannot coerce outcome with levels {levels} to logical; exactly two are required"
            )
        if len(levels) < 2:
            raise InsufficientDataError(
                f"Cannot tell the positive class of a non-numeric outcome with levels {levels}"
            )
        logical = non_missing == levels[1]

    return logical.reindex(s.index)


def zero_missing(values: Sequence | np.ndarray | pd.Series) -> pd.Series:
    """Replace all missing values with 0."""
    return _as_series(values).fillna(0)
