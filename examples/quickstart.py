#!/usr/bin/env python3
"""
Quickstart Example - Train a classifier on a folder of class subfolders.

Expects:
    ./data/<label>/*.jpg|*.jpeg|*.png
    ./data/sample.png

Usage:
    python examples/quickstart.py
"""

from folder_classifier import (
    PipelineConfig,
    TorchImageTrainer,
    TrainingOrchestrator,
    scan_images,
)

config = PipelineConfig()
orchestrator = TrainingOrchestrator(TorchImageTrainer(config.trainer), config)

result = orchestrator.run(scan_images(config.data.data_dir))

print(result.metrics.format_lines())
print(f"Model saved to {result.model_path}")
print(f"Predicted label for sample image: {result.sample_prediction.predicted_label}")
