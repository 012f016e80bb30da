"""Value objects passed between model fitting and evaluation."""

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.errors import ShapeMismatchError


class ModelSummary(BaseModel):
    """
    Everything the evaluation helpers need from a fitted binary model.

    Predictions and outcomes are always present. Likelihoods, scores and the
    naive covariance are only available for in-sample summaries; summaries of
    new data leave them as None.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    predictions: np.ndarray = Field(..., description="Predicted probability per observation.")
    outcomes: np.ndarray = Field(..., description="Observed outcome per observation, same order as predictions.")
    log_likelihood: float | None = Field(default=None, description="Log-likelihood of the fitted model.")
    log_likelihood_null: float | None = Field(default=None, description="Log-likelihood of the intercept-only model.")
    rank: int | None = Field(default=None, description="Number of estimated parameters (design matrix rank).")
    param_names: list[str] = Field(default_factory=list)
    params: np.ndarray | None = None
    score_matrix: np.ndarray | None = Field(
        default=None,
        description="Per-observation score contributions (n_obs x n_params).",
    )
    bread: np.ndarray | None = Field(default=None, description="Naive covariance of the coefficients.")
    row_labels: list[Any] = Field(
        default_factory=list,
        description="Index labels of the rows the model was evaluated on (for aligning cluster ids).",
    )

    @field_validator("predictions", "outcomes", mode="before")
    @classmethod
    def _to_vector(cls, v: Any) -> np.ndarray:
        return np.asarray(v).reshape(-1)

    @field_validator("params", "score_matrix", "bread", mode="before")
    @classmethod
    def _to_array(cls, v: Any) -> np.ndarray | None:
        return None if v is None else np.asarray(v, dtype=float)

    @property
    def n_obs(self) -> int:
        return int(len(self.predictions))

    @model_validator(mode="after")
    def _validate(self) -> "ModelSummary":
        if len(self.predictions) != len(self.outcomes):
            raise ShapeMismatchError(
                f"predictions ({len(self.predictions)}) and outcomes ({len(self.outcomes)}) differ in length"
            )

        if self.score_matrix is not None:
            if self.score_matrix.ndim != 2 or self.score_matrix.shape[0] != self.n_obs:
                raise ShapeMismatchError(
                    f"score_matrix shape {self.score_matrix.shape} does not match {self.n_obs} observations"
                )
            k = self.score_matrix.shape[1]
            if self.bread is not None and self.bread.shape != (k, k):
                raise ShapeMismatchError(f"bread shape {self.bread.shape} does not match {k} score columns")

        if self.row_labels and len(self.row_labels) != self.n_obs:
            raise ShapeMismatchError(f"{len(self.row_labels)} row labels for {self.n_obs} observations")

        return self
