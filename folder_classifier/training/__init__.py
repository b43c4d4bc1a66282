"""Training components for Folder Classifier."""

from .label_codec import LabelCodec
from .trainer import Predictor, TorchImageTrainer, TrainedModel, Trainer
from .orchestrator import TrainingOrchestrator, TrainingResult

__all__ = [
    "LabelCodec",
    "Predictor",
    "Trainer",
    "TorchImageTrainer",
    "TrainedModel",
    "TrainingOrchestrator",
    "TrainingResult",
]
