"""Logistic model fitting and conversion into ModelSummary value objects."""

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.discrete.discrete_model import BinaryResultsWrapper

from domain.evaluation.inputs import as_logical
from domain.schemas import ModelSummary

logger = logging.getLogger(__name__)


def prepare_model_frame(df: pd.DataFrame, outcome_col: str, predictor_cols: list[str]) -> pd.DataFrame:
    """
    Keep the outcome and predictors, dropping rows with any missing value.

    The outcome is coerced to 0/1 floats.
    """
    frame = df[[outcome_col, *predictor_cols]].dropna()
    dropped = len(df) - len(frame)
    if dropped:
        logger.info("Dropped %d of %d rows with missing outcome/predictor values", dropped, len(df))

    frame = frame.copy()
    frame[outcome_col] = as_logical(frame[outcome_col]).astype(float).to_numpy()
    return frame


def build_design_matrix(
    frame: pd.DataFrame,
    predictor_cols: list[str],
    columns: list[str] | None = None,
) -> pd.DataFrame:
    """
    Dummy-encode categorical predictors and add an intercept.

    Args:
        frame: Rows to encode (no missing predictor values)
        predictor_cols: Predictor column names
        columns: Design columns of a fitted model; new data is aligned to them

    Returns:
        Float design matrix indexed like ``frame``
    """
    # New data keeps every level; alignment to the fitted columns drops the reference
    design = pd.get_dummies(frame[predictor_cols], drop_first=columns is None, dtype=float)
    design = sm.add_constant(design, prepend=True, has_constant="add").astype(float)

    if columns is not None:
        design = design.reindex(columns=columns, fill_value=0.0)

    return design


def fit_logistic_model(df: pd.DataFrame, outcome_col: str, predictor_cols: list[str]) -> BinaryResultsWrapper:
    """
    Fit a logit model of ``outcome_col`` on ``predictor_cols``.

    Returns:
        statsmodels Logit results (non-robust covariance)
    """
    frame = prepare_model_frame(df, outcome_col, predictor_cols)
    design = build_design_matrix(frame, predictor_cols)

    logger.info("Fitting logit: %s ~ %s (n=%d, k=%d)", outcome_col, " + ".join(predictor_cols), *design.shape)
    results = sm.Logit(frame[outcome_col], design).fit(disp=0)

    logger.debug("Converged=%s, llf=%.4f, llnull=%.4f", results.mle_retvals.get("converged"), results.llf, results.llnull)
    return results


def summarize_logit(results: BinaryResultsWrapper) -> ModelSummary:
    """In-sample ModelSummary with likelihoods, scores and the naive covariance."""
    model = results.model
    params = results.params

    return ModelSummary(
        predictions=np.asarray(results.predict()),
        outcomes=np.asarray(model.endog),
        log_likelihood=float(results.llf),
        log_likelihood_null=float(results.llnull),
        rank=int(np.linalg.matrix_rank(model.exog)),
        param_names=[str(name) for name in params.index],
        params=params.to_numpy(),
        score_matrix=model.score_obs(params.to_numpy()),
        bread=np.asarray(results.cov_params()),
        row_labels=list(model.data.row_labels),
    )


def summarize_predictions(
    results: BinaryResultsWrapper,
    df: pd.DataFrame,
    outcome_col: str,
    predictor_cols: list[str],
) -> ModelSummary:
    """
    ModelSummary of a fitted model scored on new data (e.g. a holdout sample).

    Only predictions and outcomes are populated.
    """
    frame = prepare_model_frame(df, outcome_col, predictor_cols)
    design = build_design_matrix(frame, predictor_cols, columns=list(results.params.index))
    predictions = results.predict(design)

    return ModelSummary(
        predictions=np.asarray(predictions),
        outcomes=frame[outcome_col].to_numpy(),
        param_names=[str(name) for name in results.params.index],
        params=results.params.to_numpy(),
        row_labels=list(frame.index),
    )
