"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the model evaluation and synthetic data workflows.
"""

from application.evaluation import (
    EvaluationOutputs,
    log_evaluation_summary,
    resolve_model_columns,
    run_model_evaluation,
)
from application.modeling import fit_logistic_model, summarize_logit, summarize_predictions
from application.serialize import save_data_fingerprint, save_evaluation_artifacts
from application.synthetic import generate_and_save_synthetic_data

__all__ = [
    # Main workflows
    "run_model_evaluation",
    "log_evaluation_summary",
    "generate_and_save_synthetic_data",
    "EvaluationOutputs",
    # Modelling
    "fit_logistic_model",
    "summarize_logit",
    "summarize_predictions",
    # Data utilities
    "resolve_model_columns",
    "save_evaluation_artifacts",
    "save_data_fingerprint",
]
