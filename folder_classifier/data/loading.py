"""
Loading records into memory for training.

- Deterministic train/test split
- Reading raw image bytes
- A torch Dataset that decodes bytes into normalized tensors
"""

from io import BytesIO
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import torch
from PIL import Image, UnidentifiedImageError
from torch.utils.data import Dataset
from torchvision import transforms

from ..errors import FileSystemError, TrainerError
from .records import ImageRecord, ImageRecordWithBytes

IMAGENET_MEAN = [0.485, 0.456, 0.406]
IMAGENET_STD = [0.229, 0.224, 0.225]


def train_test_split(
    records: Sequence[ImageRecord],
    test_fraction: float = 0.2,
    seed: int = 1,
) -> Tuple[List[ImageRecord], List[ImageRecord]]:
    """
    Partition records into train and test subsets.

    The test subset holds ``int(len(records) * test_fraction)`` records chosen
    by a seeded permutation. Both subsets keep the input order, so the same
    seed and the same input always give the same partition.

    Args:
        records: Records in scan order
        test_fraction: Share of records held out, in [0, 1)
        seed: Random seed for the permutation

    Returns:
        (train_records, test_records)
    """
    if not 0.0 <= test_fraction < 1.0:
        raise ValueError(f"test_fraction must be in [0, 1), got {test_fraction}")

    n_samples = len(records)
    n_test = int(n_samples * test_fraction)

    rng = np.random.default_rng(seed)
    test_indices = set(rng.permutation(n_samples)[:n_test].tolist())

    train = [r for i, r in enumerate(records) if i not in test_indices]
    test = [r for i, r in enumerate(records) if i in test_indices]
    return train, test


def load_image_bytes(record: ImageRecord) -> ImageRecordWithBytes:
    """
    Read the full content of a record's image file.

    Raises:
        FileSystemError: If the file is missing or unreadable
    """
    try:
        with open(record.image_path, "rb") as f:
            image = f.read()
    except OSError as e:
        raise FileSystemError(f"Cannot read image {record.image_path}: {e}") from e

    return ImageRecordWithBytes(
        image_path=record.image_path,
        label=record.label,
        image=image,
    )


def build_transform(image_size: int = 224, augment: bool = False) -> transforms.Compose:
    """Resize, optionally augment, convert to tensor and normalize with ImageNet stats."""
    normalize = transforms.Normalize(mean=IMAGENET_MEAN, std=IMAGENET_STD)

    if augment:
        return transforms.Compose([
            transforms.Resize((image_size, image_size)),
            transforms.RandomHorizontalFlip(),
            transforms.RandomRotation(10),
            transforms.ColorJitter(brightness=0.2, contrast=0.2),
            transforms.ToTensor(),
            normalize
        ])

    return transforms.Compose([
        transforms.Resize((image_size, image_size)),
        transforms.ToTensor(),
        normalize
    ])


def decode_image(record: ImageRecordWithBytes) -> Image.Image:
    """Decode raw bytes into an RGB PIL image."""
    try:
        with Image.open(BytesIO(record.image)) as img:
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise TrainerError(f"Cannot decode image {record.image_path}: {e}") from e


class ImageBytesDataset(Dataset):
    """
    Dataset over byte-loaded records.

    Args:
        rows: Records with image bytes already loaded
        targets: Categorical key per row (None for unlabeled data, yields -1)
        transform: Transform applied to each decoded PIL image
    """

    def __init__(
        self,
        rows: Sequence[ImageRecordWithBytes],
        targets: Optional[Sequence[int]] = None,
        transform: Optional[Callable] = None,
    ):
        if targets is not None and len(targets) != len(rows):
            raise ValueError("targets must have one entry per row")

        self.rows = list(rows)
        self.targets = list(targets) if targets is not None else None
        self.transform = transform or build_transform()

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Tuple[torch.Tensor, int]:
        image = self.transform(decode_image(self.rows[index]))
        target = self.targets[index] if self.targets is not None else -1
        return image, target
