"""Class prevalence of a two-valued outcome."""

from collections.abc import Sequence

import numpy as np
import pandas as pd

from domain.errors import InvalidInputError
from domain.evaluation.inputs import binary_levels


def compute_prevalence(outcomes: Sequence | np.ndarray | pd.Series) -> float:
    """
    Proportion of the second distinct value (sort order) among non-missing outcomes.

    Examples:
        >>> compute_prevalence([0, 0, 0, 1])
        0.25

    Raises:
        InvalidInputError: If there are not exactly two distinct non-missing values
    """
    s = pd.Series(outcomes).dropna()
    levels = binary_levels(s)
    if len(levels) != 2:
        raise InvalidInputError(f"Prevalence requires exactly two distinct outcome values, got {levels}")

    return float((s == levels[1]).sum() / len(s))
