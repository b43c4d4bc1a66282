"""
Classification metrics for Folder Classifier.

- Micro-accuracy: share of all test images classified correctly
- Macro-accuracy: mean of per-class accuracies, each class weighted equally

The two diverge when classes are imbalanced.
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, Sequence

from sklearn.metrics import accuracy_score, balanced_accuracy_score


@dataclass(frozen=True)
class EvaluationMetrics:
    """Accuracy scores in the 0-1 range, plus the number of scored samples."""

    micro_accuracy: float
    macro_accuracy: float
    num_samples: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def format_lines(self) -> str:
        """Both scores as percentages, one per line."""
        return (
            f"MicroAccuracy: {_format_percent(self.micro_accuracy)}\n"
            f"MacroAccuracy: {_format_percent(self.macro_accuracy)}"
        )


def _format_percent(value: float) -> str:
    if math.isnan(value):
        return "n/a"
    return f"{value * 100:.2f}%"


def compute_metrics(
    true_labels: Sequence[str],
    predicted_labels: Sequence[str],
) -> EvaluationMetrics:
    """
    Compute micro- and macro-accuracy.

    Macro-accuracy averages recall over the classes present in
    ``true_labels``, which is what scikit-learn calls balanced accuracy.
    An empty test set gives NaN scores.

    Args:
        true_labels: Ground-truth labels
        predicted_labels: Predicted labels, same length

    Returns:
        EvaluationMetrics

    Example:
        metrics = compute_metrics(["a", "a", "b"], ["a", "a", "a"])
        metrics.micro_accuracy  # 0.667
        metrics.macro_accuracy  # 0.5
    """
    if len(true_labels) != len(predicted_labels):
        raise ValueError(
            f"Label count mismatch: {len(true_labels)} true vs {len(predicted_labels)} predicted"
        )

    if not true_labels:
        return EvaluationMetrics(float("nan"), float("nan"), 0)

    micro = accuracy_score(true_labels, predicted_labels)
    macro = balanced_accuracy_score(true_labels, predicted_labels)

    return EvaluationMetrics(
        micro_accuracy=float(micro),
        macro_accuracy=float(macro),
        num_samples=len(true_labels),
    )
