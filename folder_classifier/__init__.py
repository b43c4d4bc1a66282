"""
Folder Classifier - train an image classifier from a folder of labeled subfolders

Quick Start:
    # Train with the defaults: ./data -> ./model.pt, then classify ./data/sample.png
    folder-classifier train

    # Or from Python
    from folder_classifier import (
        PipelineConfig, TorchImageTrainer, TrainingOrchestrator, scan_images
    )
    config = PipelineConfig()
    orchestrator = TrainingOrchestrator(TorchImageTrainer(config.trainer), config)
    result = orchestrator.run(scan_images(config.data.data_dir))
    print(result.metrics.micro_accuracy, result.metrics.macro_accuracy)

Installation:
    pip install -e .
"""

from .config import PipelineConfig, get_config, load_config
from .data import (
    ImageRecord,
    ImageRecordWithBytes,
    Prediction,
    scan_images,
    train_test_split,
)
from .errors import EmptyDatasetError, FileSystemError, PipelineError, TrainerError
from .evaluation import EvaluationMetrics, compute_metrics
from .training import (
    LabelCodec,
    TorchImageTrainer,
    TrainedModel,
    Trainer,
    TrainingOrchestrator,
    TrainingResult,
)

__version__ = "1.0.0"

__all__ = [
    # Config
    "PipelineConfig",
    "get_config",
    "load_config",
    # Data
    "ImageRecord",
    "ImageRecordWithBytes",
    "Prediction",
    "scan_images",
    "train_test_split",
    # Training
    "LabelCodec",
    "Trainer",
    "TorchImageTrainer",
    "TrainedModel",
    "TrainingOrchestrator",
    "TrainingResult",
    # Evaluation
    "EvaluationMetrics",
    "compute_metrics",
    # Errors
    "PipelineError",
    "FileSystemError",
    "EmptyDatasetError",
    "TrainerError",
]
