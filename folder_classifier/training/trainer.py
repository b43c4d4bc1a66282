"""
Trainer interface and the PyTorch implementation for Folder Classifier.

The orchestrator only talks to the narrow ``Trainer`` interface:
- fit(): train on byte-loaded records
- transform(): predict labels for records
- evaluate(): score predictions
- save(): persist a fitted model plus its input schema
- load_predictor(): single-image prediction function

``TorchImageTrainer`` backs it with a timm backbone fine-tuned end to end.
"""

import pickle
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import torch
import torch.nn as nn
from torch.utils.data import DataLoader
from tqdm import tqdm

from ..config.settings import TrainerConfig
from ..data.loading import ImageBytesDataset, build_transform, load_image_bytes
from ..data.records import ImageRecord, ImageRecordWithBytes, Prediction
from ..errors import EmptyDatasetError, FileSystemError, PipelineError, TrainerError
from ..evaluation.metrics import EvaluationMetrics, compute_metrics
from ..models.classification import create_classifier
from ..utils import resolve_device, setup_logger
from .label_codec import LabelCodec

CHECKPOINT_FORMAT_VERSION = 1

Predictor = Callable[[ImageRecord], Prediction]


@dataclass
class TrainedModel:
    """
    Fitted classifier plus everything needed to use it.

    Attributes:
        network: The fitted PyTorch model
        codec: Label codec the network was trained with
        architecture: timm architecture name
        image_size: Square input size used in training
        history: Per-epoch train_loss and train_acc
        schema: Input columns the model was fit against
    """

    network: nn.Module
    codec: LabelCodec
    architecture: str
    image_size: int
    history: Dict[str, List[float]] = field(default_factory=dict)
    schema: Dict[str, str] = field(default_factory=dict)


class Trainer(ABC):
    """Image classification backend used by the orchestrator."""

    @abstractmethod
    def fit(self, rows: Sequence[ImageRecordWithBytes]) -> TrainedModel:
        """Train a classifier on labeled, byte-loaded records."""

    @abstractmethod
    def transform(
        self,
        model: TrainedModel,
        rows: Sequence[ImageRecordWithBytes],
    ) -> List[Prediction]:
        """Predict a label for every row."""

    def evaluate(self, predictions: Sequence[Prediction]) -> EvaluationMetrics:
        """Micro- and macro-accuracy of predictions against their input labels."""
        return compute_metrics(
            [p.label for p in predictions],
            [p.predicted_label for p in predictions],
        )

    @abstractmethod
    def save(self, model: TrainedModel, schema: Dict[str, str], path: str) -> str:
        """Write the model and schema to ``path``, replacing any existing file."""

    def load_predictor(self, model: TrainedModel) -> Predictor:
        """Return a function that reads one image from disk and classifies it."""
        def predict(record: ImageRecord) -> Prediction:
            return self.transform(model, [load_image_bytes(record)])[0]

        return predict


class TorchImageTrainer(Trainer):
    """
    Fine-tunes a timm backbone on raw image bytes.

    Example:
        trainer = TorchImageTrainer(TrainerConfig(architecture="resnet18", epochs=3))
        model = trainer.fit(rows)
        predictions = trainer.transform(model, test_rows)
        metrics = trainer.evaluate(predictions)
        trainer.save(model, RECORD_SCHEMA, "model.pt")
    """

    def __init__(self, config: Optional[TrainerConfig] = None, verbose: bool = True):
        self.config = config or TrainerConfig()
        self.verbose = verbose
        self.logger = setup_logger(self.__class__.__name__)
        self.device = resolve_device(self.config.device)

    def fit(self, rows: Sequence[ImageRecordWithBytes]) -> TrainedModel:
        if not rows:
            raise EmptyDatasetError("No training images to fit on")

        config = self.config
        codec = LabelCodec.fit(row.label for row in rows)
        self.logger.info(
            f"Fitting {config.architecture} on {len(rows)} images, "
            f"{len(codec)} classes, device {self.device}"
        )

        torch.manual_seed(config.seed)
        network = create_classifier(
            config.architecture,
            num_classes=len(codec),
            pretrained=config.pretrained,
        ).to(self.device)

        dataset = ImageBytesDataset(
            rows,
            targets=codec.encode_many(row.label for row in rows),
            transform=build_transform(config.image_size, augment=config.augment),
        )
        # BatchNorm cannot train on a trailing batch of one image
        drop_last = len(dataset) > config.batch_size and len(dataset) % config.batch_size == 1
        loader = DataLoader(
            dataset,
            batch_size=config.batch_size,
            shuffle=True,
            num_workers=0,
            drop_last=drop_last,
            generator=torch.Generator().manual_seed(config.seed),
        )

        criterion = nn.CrossEntropyLoss()
        optimizer = torch.optim.Adam(network.parameters(), lr=config.learning_rate)
        history: Dict[str, List[float]] = {"train_loss": [], "train_acc": []}

        try:
            for epoch in range(config.epochs):
                network.train()
                train_loss, train_correct, train_total = 0.0, 0, 0

                pbar = tqdm(
                    loader,
                    desc=f"Epoch {epoch+1}/{config.epochs}",
                    disable=not self.verbose,
                )
                for images, labels in pbar:
                    images, labels = images.to(self.device), labels.to(self.device)

                    optimizer.zero_grad()
                    outputs = network(images)
                    loss = criterion(outputs, labels)
                    loss.backward()
                    optimizer.step()

                    train_loss += loss.item()
                    _, preds = torch.max(outputs, 1)
                    train_correct += (preds == labels).sum().item()
                    train_total += labels.size(0)

                    pbar.set_postfix({"loss": f"{loss.item():.4f}"})

                history["train_loss"].append(train_loss / len(loader))
                history["train_acc"].append(train_correct / train_total)
                self.logger.info(
                    f"Epoch {epoch+1}: loss {history['train_loss'][-1]:.4f}, "
                    f"acc {history['train_acc'][-1]*100:.2f}%"
                )
        except PipelineError:
            raise
        except (RuntimeError, ValueError) as e:
            raise TrainerError(f"Training failed: {e}") from e

        network.eval()
        return TrainedModel(
            network=network,
            codec=codec,
            architecture=config.architecture,
            image_size=config.image_size,
            history=history,
        )

    def transform(
        self,
        model: TrainedModel,
        rows: Sequence[ImageRecordWithBytes],
    ) -> List[Prediction]:
        if not rows:
            return []

        dataset = ImageBytesDataset(rows, transform=build_transform(model.image_size))
        loader = DataLoader(dataset, batch_size=self.config.batch_size, shuffle=False, num_workers=0)

        network = model.network.to(self.device)
        network.eval()
        all_scores: List[List[float]] = []

        try:
            with torch.no_grad():
                for images, _ in loader:
                    outputs = network(images.to(self.device))
                    probs = torch.softmax(outputs, dim=1)
                    all_scores.extend(probs.cpu().tolist())
        except PipelineError:
            raise
        except (RuntimeError, ValueError) as e:
            raise TrainerError(f"Prediction failed: {e}") from e

        predictions = []
        for row, scores in zip(rows, all_scores):
            best_key = max(range(len(scores)), key=scores.__getitem__)
            predictions.append(Prediction(
                image_path=row.image_path,
                label=row.label,
                predicted_label=model.codec.decode(best_key),
                scores=scores,
            ))
        return predictions

    def save(self, model: TrainedModel, schema: Dict[str, str], path: str) -> str:
        checkpoint = {
            "format_version": CHECKPOINT_FORMAT_VERSION,
            "model_state_dict": {
                k: v.detach().cpu() for k, v in model.network.state_dict().items()
            },
            "architecture": model.architecture,
            "image_size": model.image_size,
            "class_names": model.codec.classes,
            "schema": dict(schema),
        }

        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            torch.save(checkpoint, path)
        except (OSError, RuntimeError, pickle.PicklingError) as e:
            raise TrainerError(f"Cannot save model to {path}: {e}") from e

        self.logger.info(f"Saved {model.architecture} checkpoint to {path}")
        return str(path)

    def load(self, path: str) -> TrainedModel:
        """
        Rebuild a TrainedModel from a checkpoint written by ``save``.

        Raises:
            FileSystemError: If the checkpoint file does not exist
            TrainerError: If the file is not a valid checkpoint
        """
        path = Path(path)
        if not path.is_file():
            raise FileSystemError(f"Model file not found: {path}")

        try:
            checkpoint = torch.load(path, map_location="cpu", weights_only=True)
            codec = LabelCodec(checkpoint["class_names"])
            network = create_classifier(
                checkpoint["architecture"],
                num_classes=len(codec),
                pretrained=False,
            )
            network.load_state_dict(checkpoint["model_state_dict"])
        except PipelineError:
            raise
        except (KeyError, TypeError, EOFError, RuntimeError, pickle.UnpicklingError) as e:
            raise TrainerError(f"Invalid model file {path}: {e}") from e

        network.to(self.device).eval()
        return TrainedModel(
            network=network,
            codec=codec,
            architecture=checkpoint["architecture"],
            image_size=checkpoint["image_size"],
            schema=checkpoint.get("schema", {}),
        )
