"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- errors: Evaluation error taxonomy
- schemas: ModelSummary value object
- evaluation: Classifier metrics, cluster-robust covariance, effect sizes
- synthetic: Synthetic student dataset generation
"""

from domain.schemas import ModelSummary

__all__ = [
    "ModelSummary",
]
