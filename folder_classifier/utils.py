"""
Folder Classifier Utilities

Small helpers shared across the pipeline:
- Logger setup
- Device selection
- Training history plots
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import torch


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str) -> logging.Logger:
    """
    Get an INFO-level logger with a single stream handler.

    Calling this twice with the same name never stacks handlers.

    Args:
        name: Logger name, usually the module or class name

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def resolve_device(device: str = "auto") -> torch.device:
    """
    Turn a device name into a torch.device.

    "auto" picks CUDA, then Apple MPS, then CPU.
    """
    if device == "auto":
        if torch.cuda.is_available():
            device = "cuda"
        elif hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
            device = "mps"
        else:
            device = "cpu"
    return torch.device(device)


def plot_history(
    history: Dict[str, List[float]],
    save_path: str,
) -> Optional[str]:
    """
    Plot training loss and accuracy per epoch.

    Args:
        history: Dict with train_loss and optionally train_acc
        save_path: Where to write the PNG

    Returns:
        The path written, or None when the history is empty

    Example:
        result = trainer.fit(rows)
        plot_history(result.history, "model_training.png")
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    losses = history.get("train_loss", [])
    if not losses:
        return None

    epochs = range(1, len(losses) + 1)
    has_acc = bool(history.get("train_acc"))

    if has_acc:
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 4))
    else:
        fig, ax1 = plt.subplots(1, 1, figsize=(6, 4))
        ax2 = None

    ax1.plot(epochs, losses, 'b-', label='Train Loss', linewidth=2)
    ax1.set_xlabel('Epoch')
    ax1.set_ylabel('Loss')
    ax1.set_title('Training Loss')
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    if ax2 is not None:
        ax2.plot(epochs, [a * 100 for a in history["train_acc"]], 'b-', label='Train Acc', linewidth=2)
        ax2.set_xlabel('Epoch')
        ax2.set_ylabel('Accuracy (%)')
        ax2.set_title('Training Accuracy')
        ax2.legend()
        ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return str(save_path)
