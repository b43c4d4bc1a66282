"""
Folder Classifier CLI - train an image classifier from a folder of class subfolders.

Usage:
    folder-classifier train
    folder-classifier train --data ./data --output ./model.pt --model resnet18 --epochs 5
    folder-classifier scan --data ./data
    folder-classifier predict --model ./model.pt --input ./samples
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .data.records import IMAGE_EXTENSIONS, ImageRecord


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="folder-classifier",
        description="Train an image classifier from a folder of labeled subfolders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Train with the defaults (./data -> ./model.pt, sample ./data/sample.png)
  folder-classifier train

  # Train a small backbone for a few epochs
  folder-classifier train --data ./flowers --model resnet18 --epochs 3

  # Count images per label before training
  folder-classifier scan --data ./flowers

  # Classify every image in a folder with a saved model
  folder-classifier predict --model model.pt --input ./samples
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Train command; unset options fall back to the config file / defaults
    train_parser = subparsers.add_parser(
        "train",
        help="Train, evaluate and save a classifier",
        description="Scan the data folder, train, evaluate, save the model and classify the sample image"
    )
    train_parser.add_argument(
        "--config", "-c",
        help="YAML config file"
    )
    train_parser.add_argument(
        "--data", "-d",
        help="Path to image folder with class subfolders (default: ./data)"
    )
    train_parser.add_argument(
        "--output", "-o",
        help="Output path for the saved model (default: ./model.pt)"
    )
    train_parser.add_argument(
        "--model", "-m",
        help="Backbone architecture (default: resnet50)"
    )
    train_parser.add_argument(
        "--epochs", "-e",
        type=int,
        help="Number of training epochs (default: 10)"
    )
    train_parser.add_argument(
        "--batch-size", "-b",
        type=int,
        help="Batch size (default: 10)"
    )
    train_parser.add_argument(
        "--lr",
        type=float,
        help="Learning rate (default: 0.001)"
    )
    train_parser.add_argument(
        "--image-size",
        type=int,
        help="Image size (default: 224)"
    )
    train_parser.add_argument(
        "--test-fraction",
        type=float,
        help="Share of images held out for evaluation (default: 0.2)"
    )
    train_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the split and training (default: 1)"
    )
    train_parser.add_argument(
        "--sample",
        help="Sample image to classify after training (default: sample.png in the data folder)"
    )
    train_parser.add_argument(
        "--device",
        choices=["auto", "cuda", "mps", "cpu"],
        help="Device to use (default: auto)"
    )
    train_parser.add_argument(
        "--no-pretrained",
        action="store_true",
        help="Don't use pretrained weights"
    )
    train_parser.add_argument(
        "--augment",
        action="store_true",
        help="Apply data augmentation"
    )
    train_parser.add_argument(
        "--label-from-filename",
        action="store_true",
        help="Label each image by its file name instead of its folder"
    )
    train_parser.add_argument(
        "--no-plot",
        action="store_true",
        help="Don't save the training history plot"
    )

    # Scan command
    scan_parser = subparsers.add_parser(
        "scan",
        help="Summarize a data folder",
        description="Count the images per label that training would use"
    )
    scan_parser.add_argument(
        "--data", "-d",
        default="./data",
        help="Path to image folder (default: ./data)"
    )
    scan_parser.add_argument(
        "--label-from-filename",
        action="store_true",
        help="Label each image by its file name instead of its folder"
    )

    # Predict command
    predict_parser = subparsers.add_parser(
        "predict",
        help="Classify images with a saved model",
        description="Classify one image, or every image in a folder, with a saved model"
    )
    predict_parser.add_argument(
        "--model", "-m",
        default="./model.pt",
        help="Path to saved model (default: ./model.pt)"
    )
    predict_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Image file or folder of images"
    )
    predict_parser.add_argument(
        "--device",
        default="auto",
        choices=["auto", "cuda", "mps", "cpu"],
        help="Device to use (default: auto)"
    )

    return parser


def build_config(args: argparse.Namespace):
    """Merge a config file (or the defaults) with command-line overrides."""
    from .config import PipelineConfig, load_config

    config = load_config(args.config) if args.config else PipelineConfig()

    data_updates = {
        "data_dir": args.data,
        "test_fraction": args.test_fraction,
        "seed": args.seed,
        "sample_image": args.sample,
    }
    if args.label_from_filename:
        data_updates["label_from_parent_folder"] = False

    trainer_updates = {
        "architecture": args.model,
        "epochs": args.epochs,
        "batch_size": args.batch_size,
        "learning_rate": args.lr,
        "image_size": args.image_size,
        "device": args.device,
        "seed": args.seed,
    }
    if args.no_pretrained:
        trainer_updates["pretrained"] = False
    if args.augment:
        trainer_updates["augment"] = True

    output_updates = {"model_path": args.output}

    def section(current, updates):
        updates = {k: v for k, v in updates.items() if v is not None}
        # Re-validate so bad overrides fail like bad config values
        return type(current)(**{**current.model_dump(), **updates})

    return config.model_copy(update={
        "data": section(config.data, data_updates),
        "trainer": section(config.trainer, trainer_updates),
        "output": section(config.output, output_updates),
    })


def cmd_train(args: argparse.Namespace) -> int:
    """Execute the train command."""
    from .training import TorchImageTrainer, TrainingOrchestrator
    from .utils import plot_history

    try:
        config = build_config(args)

        print(f"\n{'='*60}")
        print("Folder Classifier - Training")
        print(f"{'='*60}")
        print(f"Data:       {config.data.data_dir}")
        print(f"Model:      {config.trainer.architecture}")
        print(f"Epochs:     {config.trainer.epochs}")
        print(f"Batch size: {config.trainer.batch_size}")
        print(f"Image size: {config.trainer.image_size}")
        print(f"Output:     {config.output.model_path}")
        print(f"{'='*60}\n")

        orchestrator = TrainingOrchestrator(TorchImageTrainer(config.trainer), config)

        result = orchestrator.run_from_directory(predict_sample=False)

        print(result.metrics.format_lines())
        print(f"Model saved to {result.model_path}")

        if not args.no_plot:
            model_path = Path(result.model_path)
            plot_path = plot_history(
                result.model.history,
                str(model_path.with_name(f"{model_path.stem}_training.png")),
            )
            if plot_path:
                print(f"Training plot saved to: {plot_path}")

        prediction = orchestrator.predict_sample(result.model)
        print(f"Predicted label for sample image: {prediction.predicted_label}")

        return 0

    except Exception as e:
        print(f"\nError during training: {e}", file=sys.stderr)
        return 1


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute the scan command."""
    from .data import print_dataset_summary, scan_images, summarize_records

    print(f"\n{'='*60}")
    print("Folder Classifier - Dataset Scan")
    print(f"{'='*60}")
    print(f"Scanning: {args.data}")
    print(f"{'='*60}")

    try:
        summary = summarize_records(scan_images(
            args.data,
            label_from_parent_folder=not args.label_from_filename,
        ))
        print_dataset_summary(summary)

        if summary["total_images"] == 0:
            print("⚠️  No .jpg/.jpeg/.png images found in subfolders; training would fail.")

        return 0

    except Exception as e:
        print(f"\nError during scan: {e}", file=sys.stderr)
        return 1


def collect_inputs(input_path: str) -> List[ImageRecord]:
    """
    Records to classify for the predict command.

    A file becomes one unlabeled record. A folder contributes its own image
    files unlabeled, plus labeled images from its class subfolders.
    """
    from .data import scan_images
    from .errors import FileSystemError

    path = Path(input_path)
    if path.is_file():
        return [ImageRecord(image_path=str(path), label="")]
    if not path.is_dir():
        raise FileSystemError(f"Input not found: {input_path}")

    records = [
        ImageRecord(image_path=os.path.join(input_path, name), label="")
        for name in sorted(os.listdir(input_path))
        if os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS
        and os.path.isfile(os.path.join(input_path, name))
    ]
    records.extend(scan_images(input_path))
    return records


def cmd_predict(args: argparse.Namespace) -> int:
    """Execute the predict command."""
    from .config import TrainerConfig
    from .data import load_image_bytes
    from .training import TorchImageTrainer

    print(f"\n{'='*60}")
    print("Folder Classifier - Prediction")
    print(f"{'='*60}")
    print(f"Model:  {args.model}")
    print(f"Input:  {args.input}")
    print(f"{'='*60}\n")

    try:
        trainer = TorchImageTrainer(TrainerConfig(device=args.device), verbose=False)
        model = trainer.load(args.model)

        records = collect_inputs(args.input)
        if not records:
            print("No images to classify.")
            return 0

        predictions = trainer.transform(model, [load_image_bytes(r) for r in records])
        for prediction in predictions:
            confidence = max(prediction.scores) * 100 if prediction.scores else 0.0
            print(f"{prediction.image_path:<50} {prediction.predicted_label:<20} {confidence:>6.2f}%")

        labeled = [p for p in predictions if p.label]
        if labeled:
            print()
            print(trainer.evaluate(labeled).format_lines())

        return 0

    except Exception as e:
        print(f"\nError during prediction: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "train": cmd_train,
        "scan": cmd_scan,
        "predict": cmd_predict,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
