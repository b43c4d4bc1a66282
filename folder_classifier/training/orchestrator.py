"""
End-to-end training run for Folder Classifier.

Pipeline (strictly sequential, nothing is retried):

1. Materialize the scanned records.
2. Seeded train/test split.
3. Load every image's bytes.
4. Fit the trainer on the training subset only.
5. Evaluate on the held-out subset (micro- and macro-accuracy).
6. Save the model plus the record schema, overwriting any previous file.
7. Smoke-test prediction on the designated sample image.

A failure at any step aborts the run. A missing sample image fails after the
model has been saved; the saved file is kept.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ..config.settings import PipelineConfig
from ..data.loading import load_image_bytes, train_test_split
from ..data.records import RECORD_SCHEMA, ImageRecord, Prediction
from ..data.scanner import scan_images, summarize_records
from ..errors import EmptyDatasetError
from ..evaluation.metrics import EvaluationMetrics
from ..utils import setup_logger
from .trainer import TrainedModel, Trainer


@dataclass
class TrainingResult:
    """What a completed run produced."""

    model: TrainedModel
    metrics: EvaluationMetrics
    model_path: str
    sample_prediction: Optional[Prediction]
    num_train: int
    num_test: int


class TrainingOrchestrator:
    """
    Sequences a training run against any ``Trainer``.

    Args:
        trainer: Backend that fits, evaluates and saves the model
        config: Pipeline configuration (split, paths)

    Example:
        orchestrator = TrainingOrchestrator(TorchImageTrainer(config.trainer), config)
        result = orchestrator.run(scan_images(config.data.data_dir))
        print(result.metrics.micro_accuracy)
    """

    def __init__(self, trainer: Trainer, config: Optional[PipelineConfig] = None):
        self.trainer = trainer
        self.config = config or PipelineConfig()
        self.logger = setup_logger(self.__class__.__name__)

    def run(
        self,
        records: Iterable[ImageRecord],
        predict_sample: bool = True,
    ) -> TrainingResult:
        """
        Train, evaluate, save and smoke-test a classifier.

        Args:
            records: Labeled images, usually from ``scan_images``
            predict_sample: Run the sample image prediction at the end

        Returns:
            TrainingResult

        Raises:
            EmptyDatasetError: If there are no records
            FileSystemError: If an image or the sample image cannot be read
            TrainerError: If the backend fails
        """
        data_config = self.config.data
        model_path = self.config.output.model_path

        record_list = list(records)
        if not record_list:
            raise EmptyDatasetError(
                f"No .jpg/.jpeg/.png images found in subfolders of {data_config.data_dir}"
            )

        summary = summarize_records(record_list)
        self.logger.info(
            f"Loaded {summary['total_images']} images in {summary['num_classes']} classes"
        )

        train_records, test_records = train_test_split(
            record_list,
            test_fraction=data_config.test_fraction,
            seed=data_config.seed,
        )
        self.logger.info(f"Split: {len(train_records)} train, {len(test_records)} test")

        train_rows = [load_image_bytes(record) for record in train_records]
        test_rows = [load_image_bytes(record) for record in test_records]

        self.logger.info("Training the model...")
        model = self.trainer.fit(train_rows)

        self.logger.info("Evaluating the model...")
        if test_rows:
            predictions = self.trainer.transform(model, test_rows)
        else:
            self.logger.warning("Test split is empty; accuracy cannot be measured")
            predictions = []
        metrics = self.trainer.evaluate(predictions)
        for line in metrics.format_lines().splitlines():
            self.logger.info(line)

        saved_path = self.trainer.save(model, RECORD_SCHEMA, model_path)
        self.logger.info(f"Model saved to {saved_path}")

        sample_prediction = None
        if predict_sample:
            sample_prediction = self.predict_sample(model)

        return TrainingResult(
            model=model,
            metrics=metrics,
            model_path=saved_path,
            sample_prediction=sample_prediction,
            num_train=len(train_records),
            num_test=len(test_records),
        )

    def predict_sample(self, model: TrainedModel) -> Prediction:
        """Classify the configured sample image with a fitted model."""
        predictor = self.trainer.load_predictor(model)
        sample = ImageRecord(image_path=self.config.sample_image_path(), label="")
        prediction = predictor(sample)
        self.logger.info(f"Predicted label for sample image: {prediction.predicted_label}")
        return prediction

    def run_from_directory(self, predict_sample: bool = True) -> TrainingResult:
        """Scan the configured data directory and run the pipeline on it."""
        data_config = self.config.data
        records = scan_images(
            data_config.data_dir,
            label_from_parent_folder=data_config.label_from_parent_folder,
        )
        return self.run(records, predict_sample=predict_sample)
