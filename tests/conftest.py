"""
Pytest fixtures for Folder Classifier tests.

Creates temporary directories with sample images for testing, and a fake
deterministic trainer for exercising the orchestrator without PyTorch training.
"""

import json
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np
import pytest
import torch.nn as nn
from PIL import Image

from folder_classifier.data.records import ImageRecordWithBytes, Prediction
from folder_classifier.training.label_codec import LabelCodec
from folder_classifier.training.trainer import TrainedModel, Trainer


def _save_random_image(path: Path, size: int = 64, seed: int = 0) -> None:
    rng = np.random.default_rng(seed)
    img_array = rng.integers(0, 255, (size, size, 3), dtype=np.uint8)
    Image.fromarray(img_array).save(path)


@pytest.fixture(scope="session")
def sample_image_folder(tmp_path_factory):
    """
    Create a temporary folder with sample images organized by class.

    Structure:
        temp_dir/
        ├── class_0/
        │   ├── img_0.jpg ... img_4.jpg
        ├── class_1/
        │   ├── img_0.jpg ... img_4.jpg
        └── sample.png
    """
    base_dir = tmp_path_factory.mktemp("sample_images")

    for class_idx in range(2):
        class_dir = base_dir / f"class_{class_idx}"
        class_dir.mkdir()

        for img_idx in range(5):
            _save_random_image(class_dir / f"img_{img_idx}.jpg", seed=class_idx * 10 + img_idx)

    _save_random_image(base_dir / "sample.png", seed=99)

    yield str(base_dir)


@pytest.fixture(scope="session")
def sample_image_folder_imbalanced(tmp_path_factory):
    """Create a folder with imbalanced classes for testing."""
    base_dir = tmp_path_factory.mktemp("imbalanced_images")

    # Class 0: 10 images, Class 1: 2 images (5:1 ratio)
    class_sizes = [10, 2]

    for class_idx, num_images in enumerate(class_sizes):
        class_dir = base_dir / f"class_{class_idx}"
        class_dir.mkdir()

        for img_idx in range(num_images):
            _save_random_image(class_dir / f"img_{img_idx}.png", size=32, seed=class_idx * 100 + img_idx)

    _save_random_image(base_dir / "sample.png", size=32, seed=7)

    yield str(base_dir)


@pytest.fixture
def mixed_tree(tmp_path):
    """
    A data folder with root-level files that must be ignored.

    Structure:
        data/
        ├── cat/a.jpg
        ├── dog/b.png
        ├── readme.txt
        └── c.jpg
    """
    root = tmp_path / "data"
    (root / "cat").mkdir(parents=True)
    (root / "dog").mkdir()

    _save_random_image(root / "cat" / "a.jpg", size=16, seed=1)
    _save_random_image(root / "dog" / "b.png", size=16, seed=2)
    _save_random_image(root / "c.jpg", size=16, seed=3)
    (root / "readme.txt").write_text("not an image")

    yield str(root)


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create a temporary directory for test outputs."""
    yield str(tmp_path)


class FakeTrainer(Trainer):
    """
    Deterministic stand-in for the PyTorch trainer.

    Predicts the most frequent training label for every image and saves a
    JSON artifact. Every call is appended to ``calls`` so tests can check
    sequencing.
    """

    def __init__(self):
        self.calls: List[str] = []
        self.fit_rows: List[ImageRecordWithBytes] = []
        self.transform_rows: List[ImageRecordWithBytes] = []

    def fit(self, rows: Sequence[ImageRecordWithBytes]) -> TrainedModel:
        self.calls.append("fit")
        self.fit_rows = list(rows)
        codec = LabelCodec.fit(row.label for row in rows)
        counts = [0] * len(codec)
        for row in rows:
            counts[codec.encode(row.label)] += 1
        model = TrainedModel(
            network=nn.Identity(),
            codec=codec,
            architecture="fake",
            image_size=0,
            history={"train_loss": [1.0, 0.5]},
        )
        model.majority_key = counts.index(max(counts))
        return model

    def transform(self, model: TrainedModel, rows: Sequence[ImageRecordWithBytes]) -> List[Prediction]:
        self.calls.append("transform")
        self.transform_rows.extend(rows)
        scores = [0.0] * len(model.codec)
        scores[model.majority_key] = 1.0
        return [
            Prediction(
                image_path=row.image_path,
                label=row.label,
                predicted_label=model.codec.decode(model.majority_key),
                scores=list(scores),
            )
            for row in rows
        ]

    def evaluate(self, predictions):
        self.calls.append("evaluate")
        return super().evaluate(predictions)

    def save(self, model: TrainedModel, schema: Dict[str, str], path: str) -> str:
        self.calls.append("save")
        artifact = {
            "classes": model.codec.classes,
            "schema": schema,
            "trained_on": [row.image_path for row in self.fit_rows],
        }
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).write_text(json.dumps(artifact, indent=2, sort_keys=True))
        return str(path)

    def load_predictor(self, model: TrainedModel):
        self.calls.append("load_predictor")
        return super().load_predictor(model)


@pytest.fixture
def fake_trainer():
    """A fresh FakeTrainer per test."""
    return FakeTrainer()


@pytest.fixture(scope="session")
def device():
    """Training device for the real trainer; CPU keeps results reproducible."""
    return "cpu"
