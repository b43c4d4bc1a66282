"""
Dataset scanning for Folder Classifier.

Works with folder structure:
    data_dir/
        class_a/
            img1.jpg
            img2.png
        class_b/
            nested/
                img3.jpeg
        sample.png        <- skipped, files directly in data_dir never qualify

Public API
----------
scan_images           - Lazy walk of a data directory -> ImageRecord per image.
summarize_records     - Per-label counts for a list of records.
print_dataset_summary - Console table of a summary.
"""

import os
from collections import Counter
from typing import Any, Dict, Iterable, Iterator

from ..errors import FileSystemError
from .records import IMAGE_EXTENSIONS, ImageRecord


def _same_directory(left: str, right: str) -> bool:
    """Case-insensitive comparison of two directory paths."""
    return os.path.normpath(left).lower() == os.path.normpath(right).lower()


def scan_images(
    root: str,
    label_from_parent_folder: bool = True,
) -> Iterator[ImageRecord]:
    """
    Yield an ImageRecord for every image under ``root``.

    Files at any depth below ``root`` qualify as long as they sit in at
    least one subfolder and have a .jpg, .jpeg or .png extension (any case).
    Order follows the filesystem listing and may differ across platforms.

    Args:
        root: Data directory to walk
        label_from_parent_folder: Label each image with its containing
            folder's name; otherwise with its own file name

    Yields:
        ImageRecord for each qualifying file

    Raises:
        FileSystemError: If ``root`` is not an existing directory

    Example:
        records = list(scan_images("./data"))
        print(records[0].label)
    """
    root = os.fspath(root)
    if not os.path.isdir(root):
        raise FileSystemError(f"Data directory not found: {root}")

    for dirpath, _dirnames, filenames in os.walk(root):
        if _same_directory(dirpath, root):
            continue

        for filename in filenames:
            extension = os.path.splitext(filename)[1].lower()
            if extension not in IMAGE_EXTENSIONS:
                continue

            if label_from_parent_folder:
                label = os.path.basename(os.path.normpath(dirpath))
            else:
                label = filename

            yield ImageRecord(image_path=os.path.join(dirpath, filename), label=label)


def summarize_records(records: Iterable[ImageRecord]) -> Dict[str, Any]:
    """
    Count images per label.

    Returns:
        Dict with total_images, num_classes and class_distribution
    """
    counts = Counter(record.label for record in records)
    return {
        "total_images": sum(counts.values()),
        "num_classes": len(counts),
        "class_distribution": dict(counts),
    }


def print_dataset_summary(summary: Dict[str, Any]) -> None:
    """Print formatted dataset summary."""
    print("\n" + "=" * 50)
    print("📊 DATASET SUMMARY")
    print("=" * 50)
    print(f"  Total images:  {summary['total_images']:,}")
    print(f"  Classes:       {summary['num_classes']}")

    class_dist = summary.get("class_distribution", {})
    if class_dist:
        print("\n  Class distribution:")
        max_count = max(class_dist.values())
        for cls, count in sorted(class_dist.items(), key=lambda x: -x[1])[:10]:
            bar = "█" * min(int(count / max_count * 20), 20)
            print(f"    {cls:<20} {count:>6}  {bar}")

        if len(class_dist) > 10:
            print(f"    ... and {len(class_dist) - 10} more classes")

    print("=" * 50 + "\n")
