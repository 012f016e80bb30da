"""Configuration models (Pydantic classes)."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from infrastructure.constants import DATA_DIR


class ColumnsConfig(BaseModel):
    """Column name mapping for the student analysis file."""

    outcome_col: str
    predictor_cols: list[str]
    cluster_col: str | None = None

    # Effect sizes: each value column is compared across each two-level group column
    group_cols: list[str] = Field(default_factory=list)
    effect_size_cols: list[str] = Field(default_factory=list)


class StatsConfig(BaseModel):
    """
    Configuration for evaluation statistics.

    Bootstrap settings for the AUC confidence interval.
    """

    seed: int = 42
    n_boot: int = 2000
    alpha: float = 0.05


class ThresholdConfig(BaseModel):
    """How classification thresholds are chosen."""

    cost: float = Field(default=0.3, gt=0, description="Relative cost of a false negative for the default weights.")
    class_weight: tuple[float, float] | None = Field(
        default=None,
        description="Explicit (w_neg, w_pos) for the top-left distance; overrides prevalence-based weights.",
    )
    confusion_threshold: Literal["mean", "optimal"] | float = Field(
        default="mean",
        description="Cutoff for the confusion matrix: mean prediction, optimal threshold, or a fixed value.",
    )

    @model_validator(mode="after")
    def _validate(self) -> "ThresholdConfig":
        if isinstance(self.confusion_threshold, float) and not 0 <= self.confusion_threshold <= 1:
            raise ValueError("confusion_threshold must be within [0, 1] when numeric")
        if self.class_weight is not None and min(self.class_weight) < 0:
            raise ValueError("class_weight entries must be non-negative")
        return self


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from experiment.yaml
    - Validated and enriched by configuration loader
    - Consumed by the evaluation workflow
    """

    run_label: str = Field(default="base", description="Short name for the fitted model, used in run ids.")
    data_file_path: Path = Field(..., description="Path to the student analysis file (CSV, Excel or Stata).")

    columns: ColumnsConfig
    stats: StatsConfig = Field(default_factory=StatsConfig)
    threshold: ThresholdConfig = Field(default_factory=ThresholdConfig)

    test_fraction: float | None = Field(
        default=None,
        description="Optional share of rows held out (stratified) to evaluate the model on new data.",
    )

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if not self.columns.predictor_cols:
            raise ValueError("columns.predictor_cols must list at least one predictor")

        if self.columns.outcome_col in self.columns.predictor_cols:
            raise ValueError(f"Outcome column '{self.columns.outcome_col}' cannot also be a predictor")

        if self.columns.cluster_col is not None and not str(self.columns.cluster_col).strip():
            self.columns.cluster_col = None

        if self.test_fraction is not None and not 0 < self.test_fraction < 1:
            raise ValueError("test_fraction must be strictly between 0 and 1")

        return self


class SyntheticDataConfig(BaseModel):
    """Parameters for the synthetic multi-district student file."""

    seed: int = 11213
    n_districts: int = Field(default=45, ge=1)
    size_scale: float = Field(default=1.0, gt=0, description="Multiplier on the sampled district cohort sizes.")
    district_sizes: list[int] = Field(default_factory=lambda: [2500, 2250, 2750, 3500, 1200, 5000])
    schools_range: tuple[int, int] = (8, 16)
    first_cohort_year: int = 2008
    n_cohorts: int = Field(default=4, ge=1)
    coop_size: int = Field(default=5, ge=1, description="Districts per cooperative.")

    # Salting rates applied to the finished file
    absence_outlier_rate: float = 0.005
    absence_extreme_rate: float = 0.001
    absence_missing_rate: float = 0.005
    score_missing_rate: float = 0.01
    demographic_missing_rate: float = 0.01
    frpl_unknown_rate: float = 0.025
    frpl_reduced_rate: float = 0.25

    output_file: Path = Field(default_factory=lambda: DATA_DIR / "montucky.csv")

    @model_validator(mode="after")
    def _validate(self) -> "SyntheticDataConfig":
        low, high = self.schools_range
        if low < 1 or high < low:
            raise ValueError(f"schools_range must be an increasing pair of positive ints, got {self.schools_range}")
        if not self.district_sizes or min(self.district_sizes) < 1:
            raise ValueError("district_sizes must contain positive cohort sizes")
        return self
