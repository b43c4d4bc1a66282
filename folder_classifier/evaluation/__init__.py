"""Evaluation metrics for Folder Classifier."""

from .metrics import EvaluationMetrics, compute_metrics

__all__ = ["EvaluationMetrics", "compute_metrics"]
