"""Evaluation workflow and summary logging."""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd
from sklearn.model_selection import train_test_split

from application.constants import CLUSTER_SUFFIX, HOLDOUT_PREFIX, NAIVE_SUFFIX
from application.modeling import fit_logistic_model, summarize_logit, summarize_predictions
from domain.evaluation import (
    coefficient_table,
    compute_classifier_metrics,
    compute_cluster_robust_vcov,
    compute_standardized_mean_diff,
)
from domain.schemas import ModelSummary
from infrastructure.config.models import RunConfig
from infrastructure.observability import log_stage, set_log_context

logger = logging.getLogger(__name__)


@dataclass
class EvaluationOutputs:
    """Everything a run produces, ready to serialize."""

    metrics: dict
    cm_df: pd.DataFrame
    coef_df: pd.DataFrame
    holdout_cm_df: pd.DataFrame | None = None
    effect_df: pd.DataFrame | None = None


def resolve_model_columns(cfg: RunConfig, df: pd.DataFrame) -> None:
    """
    Check that every configured column exists in the analysis file.

    Raises:
        KeyError: If any configured column is missing
    """
    cols = cfg.columns
    required = [cols.outcome_col, *cols.predictor_cols, *cols.group_cols, *cols.effect_size_cols]
    if cols.cluster_col is not None:
        required.append(cols.cluster_col)

    missing = [c for c in dict.fromkeys(required) if c not in df.columns]
    if missing:
        raise KeyError(f"Configured columns {missing} not found in dataset columns: {list(df.columns)}")


def split_holdout(cfg: RunConfig, df: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame | None]:
    """Stratified train/holdout split when test_fraction is set; otherwise use every row for fitting."""
    if cfg.test_fraction is None:
        return df, None

    outcome = cfg.columns.outcome_col
    labelled = df[df[outcome].notna()]
    train_df, test_df = train_test_split(
        labelled,
        test_size=cfg.test_fraction,
        random_state=cfg.stats.seed,
        stratify=labelled[outcome],
    )
    logger.info("Holdout split: %d training rows, %d holdout rows", len(train_df), len(test_df))
    return train_df, test_df


def compute_coefficient_tables(cfg: RunConfig, df: pd.DataFrame, summary: ModelSummary) -> pd.DataFrame:
    """
    Coefficient table with naive standard errors, plus cluster-robust ones when a cluster column is set.

    Cluster ids are aligned to the rows the model was fitted on.
    """
    params = pd.Series(summary.params, index=summary.param_names)
    bread = pd.DataFrame(summary.bread, index=summary.param_names, columns=summary.param_names)
    naive = coefficient_table(params, bread)

    cluster_col = cfg.columns.cluster_col
    if cluster_col is None:
        return naive

    clusters = df.loc[summary.row_labels, cluster_col]
    vcov = compute_cluster_robust_vcov(
        summary.score_matrix,
        clusters,
        rank=summary.rank,
        n_obs=summary.n_obs,
        bread=summary.bread,
        param_names=summary.param_names,
    )
    logger.info("Cluster-robust covariance on '%s' (%d clusters)", cluster_col, clusters.nunique())

    robust = coefficient_table(params, vcov)
    return naive.join(robust.drop(columns=["estimate"]), lsuffix=NAIVE_SUFFIX, rsuffix=CLUSTER_SUFFIX)


def compute_effect_sizes(cfg: RunConfig, df: pd.DataFrame) -> pd.DataFrame | None:
    """Standardized mean difference of each effect-size column across each group column."""
    if not cfg.columns.group_cols or not cfg.columns.effect_size_cols:
        return None

    rows: list[dict[str, object]] = []
    for group_col in cfg.columns.group_cols:
        for value_col in cfg.columns.effect_size_cols:
            smd = compute_standardized_mean_diff(df[value_col], df[group_col])
            rows.append(
                {
                    "group_col": group_col,
                    "value_col": value_col,
                    "std_mean_diff": smd,
                    "n": int((df[value_col].notna() & df[group_col].notna()).sum()),
                }
            )
            logger.debug("Effect size %s by %s: %.4f", value_col, group_col, smd)

    return pd.DataFrame(rows)


def run_model_evaluation(cfg: RunConfig, df: pd.DataFrame) -> EvaluationOutputs:
    """
    Fit the configured logit model and compute every evaluation artifact.

    In-sample metrics are always computed; holdout metrics (prefixed ``holdout_``)
    only when test_fraction is set.

    Args:
        cfg: RunConfig instance
        df: Student analysis file

    Returns:
        EvaluationOutputs with metrics, confusion matrices, coefficients and effect sizes
    """
    resolve_model_columns(cfg, df)
    cols = cfg.columns
    set_log_context(outcome=cols.outcome_col)

    with log_stage("fit"):
        train_df, test_df = split_holdout(cfg, df)
        results = fit_logistic_model(train_df, cols.outcome_col, cols.predictor_cols)
        summary = summarize_logit(results)

    with log_stage("evaluate"):
        metrics, cm_df = compute_classifier_metrics(summary, cfg.stats, cfg.threshold)
        logger.info("AUC: %.4f", metrics["auc"])

        holdout_cm_df: pd.DataFrame | None = None
        if test_df is not None:
            holdout_summary = summarize_predictions(results, test_df, cols.outcome_col, cols.predictor_cols)
            # Threshold is chosen on the training rows, never on holdout labels
            holdout_metrics, holdout_cm_df = compute_classifier_metrics(
                holdout_summary,
                cfg.stats,
                cfg.threshold,
                optimal_threshold=metrics["optimal_threshold"],
            )
            # Prefix with 'holdout_' so they don't collide with in-sample metrics
            for key, value in holdout_metrics.items():
                metrics[f"{HOLDOUT_PREFIX}{key}"] = value
            logger.info("Holdout AUC: %.4f", metrics[f"{HOLDOUT_PREFIX}auc"])

    with log_stage("coefficients"):
        coef_df = compute_coefficient_tables(cfg, train_df, summary)

    with log_stage("effect_sizes"):
        effect_df = compute_effect_sizes(cfg, df)

    return EvaluationOutputs(
        metrics=metrics,
        cm_df=cm_df,
        coef_df=coef_df,
        holdout_cm_df=holdout_cm_df,
        effect_df=effect_df,
    )


def log_evaluation_summary(outputs: EvaluationOutputs, artifact_paths: dict[str, Path]) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        outputs: Results of run_model_evaluation
        artifact_paths: Written artifacts by name
    """
    metrics = outputs.metrics
    logger.info("=== Evaluation Summary ===")
    logger.info("Observations: %d (prevalence %.4f)", metrics["n_obs"], metrics["prevalence"])
    logger.info(
        "AUC: %.4f (95%% CI [%.4f, %.4f])",
        metrics["auc"],
        metrics["auc_ci_95"][0],
        metrics["auc_ci_95"][1],
    )
    if metrics["pseudo_r_squared"] is not None:
        logger.info("Pseudo R-squared: %.4f", metrics["pseudo_r_squared"])
    logger.info(
        "Optimal threshold: %.4f; confusion threshold: %.4f",
        metrics["optimal_threshold"],
        metrics["confusion_threshold"],
    )
    logger.debug("Confusion matrix (rows=pred, cols=obs):\n%s", outputs.cm_df)
    logger.info("Accuracy: %.4f", metrics["accuracy"])

    if outputs.holdout_cm_df is not None:
        logger.info("--- Holdout metrics ---")
        logger.info(
            "Holdout AUC: %.4f (95%% CI [%.4f, %.4f])",
            metrics["holdout_auc"],
            metrics["holdout_auc_ci_95"][0],
            metrics["holdout_auc_ci_95"][1],
        )
        logger.debug("Holdout confusion matrix (rows=pred, cols=obs):\n%s", outputs.holdout_cm_df)
        logger.info("Holdout accuracy: %.4f", metrics["holdout_accuracy"])

    logger.debug("Coefficients:\n%s", outputs.coef_df)
    if outputs.effect_df is not None:
        logger.info("Effect sizes:\n%s", outputs.effect_df.to_string(index=False))

    logger.info("--- Artifacts ---")
    for name, path in artifact_paths.items():
        logger.info("%s: %s", name, path)
