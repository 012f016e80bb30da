"""
Evaluation metrics and statistical analysis.

Provides:
- Binary classifier accuracy (AUC, pseudo R-squared, optimal threshold, confusion matrix)
- Class prevalence
- Cluster-robust covariance and coefficient tables
- Standardized mean differences
- Bootstrap confidence intervals

All functions are pure (depend only on numpy, pandas, scipy, sklearn).
"""

from domain.evaluation.bootstrap import bootstrap_ci
from domain.evaluation.classifier import (
    compute_auc,
    compute_confusion_matrix,
    compute_optimal_threshold,
    compute_pseudo_r_squared,
    default_class_weight,
)
from domain.evaluation.cluster import (
    coefficient_table,
    compute_cluster_robust_vcov,
    sandwich_estimator,
)
from domain.evaluation.effect_size import compute_standardized_mean_diff
from domain.evaluation.inputs import as_logical, paired_complete_cases, zero_missing
from domain.evaluation.metrics import compute_classifier_metrics
from domain.evaluation.prevalence import compute_prevalence

__all__ = [
    "compute_auc",
    "compute_pseudo_r_squared",
    "compute_optimal_threshold",
    "compute_confusion_matrix",
    "default_class_weight",
    "compute_prevalence",
    "compute_cluster_robust_vcov",
    "sandwich_estimator",
    "coefficient_table",
    "compute_standardized_mean_diff",
    "compute_classifier_metrics",
    "bootstrap_ci",
    "paired_complete_cases",
    "as_logical",
    "zero_missing",
]
