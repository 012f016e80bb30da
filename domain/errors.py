"""Error taxonomy for evaluation helpers.

Every error is raised at the point of detection; callers are expected to clean
inputs (missing values, sample size) before invoking the helpers.
"""


class EvaluationError(ValueError):
    """Base class for all evaluation errors."""


class ShapeMismatchError(EvaluationError):
    """Input vectors or matrices have incompatible lengths/shapes."""


class InsufficientDataError(EvaluationError):
    """A class or sample is empty (or degenerate) after dropping missing values."""


class InvalidInputError(EvaluationError):
    """Input has the wrong number of distinct categories or invalid entries."""


class DegenerateClusterError(EvaluationError):
    """Too few clusters, or not enough observations for the number of parameters."""


class InvalidModelError(EvaluationError):
    """Model quantities cannot support the requested statistic."""
