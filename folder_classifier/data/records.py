"""
Record types passed between the scanner, the orchestrator and the trainer.
"""

from dataclasses import dataclass, field
from typing import Dict, List

# Columns every ImageRecord carries; saved next to the model weights.
RECORD_SCHEMA: Dict[str, str] = {
    "image_path": "str",
    "label": "str",
}

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


@dataclass(frozen=True)
class ImageRecord:
    """One image file and its class label."""

    image_path: str
    label: str


@dataclass(frozen=True)
class ImageRecordWithBytes(ImageRecord):
    """ImageRecord with the raw file content loaded, ready for the trainer."""

    image: bytes = field(default=b"", repr=False)


@dataclass(frozen=True)
class Prediction:
    """
    Result of classifying one image.

    Attributes:
        image_path: Path of the classified image
        label: Input label (empty for unlabeled samples)
        predicted_label: Predicted class name, never a numeric key
        scores: Class probabilities ordered by categorical key
    """

    image_path: str
    label: str
    predicted_label: str
    scores: List[float] = field(default_factory=list)
