"""Dataset scanning, records and byte loading."""

from .records import (
    IMAGE_EXTENSIONS,
    RECORD_SCHEMA,
    ImageRecord,
    ImageRecordWithBytes,
    Prediction,
)
from .scanner import scan_images, summarize_records, print_dataset_summary
from .loading import (
    ImageBytesDataset,
    build_transform,
    load_image_bytes,
    train_test_split,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "RECORD_SCHEMA",
    "ImageRecord",
    "ImageRecordWithBytes",
    "Prediction",
    "scan_images",
    "summarize_records",
    "print_dataset_summary",
    "ImageBytesDataset",
    "build_transform",
    "load_image_bytes",
    "train_test_split",
]
