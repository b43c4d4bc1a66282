"""
Tests for folder_classifier/data/loading.py

- train_test_split determinism and sizes
- load_image_bytes
- ImageBytesDataset decoding
"""

import pytest
import torch

from folder_classifier.data import (
    ImageBytesDataset,
    ImageRecord,
    build_transform,
    load_image_bytes,
    scan_images,
    train_test_split,
)
from folder_classifier.errors import FileSystemError, TrainerError


def _records(n):
    return [ImageRecord(f"img_{i}.jpg", f"label_{i % 3}") for i in range(n)]


class TestTrainTestSplit:
    """Tests for train_test_split."""

    def test_same_seed_same_partition(self):
        records = _records(50)

        first = train_test_split(records, test_fraction=0.2, seed=1)
        second = train_test_split(records, test_fraction=0.2, seed=1)

        assert first == second

    def test_different_seed_changes_partition(self):
        records = _records(50)

        _, test_a = train_test_split(records, test_fraction=0.2, seed=1)
        _, test_b = train_test_split(records, test_fraction=0.2, seed=2)

        assert test_a != test_b

    def test_sizes_and_disjoint(self):
        records = _records(23)

        train, test = train_test_split(records, test_fraction=0.2, seed=5)

        assert len(test) == 4  # int(23 * 0.2)
        assert len(train) == 19
        assert set(train).isdisjoint(test)
        assert set(train) | set(test) == set(records)

    def test_preserves_scan_order(self):
        records = _records(30)
        position = {r: i for i, r in enumerate(records)}

        train, test = train_test_split(records, test_fraction=0.3, seed=3)

        assert [position[r] for r in train] == sorted(position[r] for r in train)
        assert [position[r] for r in test] == sorted(position[r] for r in test)

    def test_zero_fraction_keeps_everything_for_training(self):
        records = _records(7)

        train, test = train_test_split(records, test_fraction=0.0)

        assert train == records
        assert test == []

    def test_invalid_fraction(self):
        with pytest.raises(ValueError):
            train_test_split(_records(5), test_fraction=1.0)


class TestLoadImageBytes:
    """Tests for load_image_bytes."""

    def test_reads_full_content(self, tmp_path):
        path = tmp_path / "a" / "x.png"
        path.parent.mkdir()
        path.write_bytes(b"\x89PNG fake content")

        row = load_image_bytes(ImageRecord(str(path), "a"))

        assert row.image == b"\x89PNG fake content"
        assert row.image_path == str(path)
        assert row.label == "a"

    def test_missing_file_raises(self, tmp_path):
        record = ImageRecord(str(tmp_path / "gone.jpg"), "x")

        with pytest.raises(FileSystemError):
            load_image_bytes(record)


class TestImageBytesDataset:
    """Tests for ImageBytesDataset."""

    def test_decodes_to_normalized_tensor(self, sample_image_folder):
        rows = [load_image_bytes(r) for r in scan_images(sample_image_folder)]
        dataset = ImageBytesDataset(rows, targets=[0] * len(rows), transform=build_transform(32))

        image, target = dataset[0]

        assert len(dataset) == 10
        assert isinstance(image, torch.Tensor)
        assert image.shape == (3, 32, 32)
        assert target == 0

    def test_unlabeled_rows_yield_minus_one(self, mixed_tree):
        rows = [load_image_bytes(r) for r in scan_images(mixed_tree)]
        dataset = ImageBytesDataset(rows, transform=build_transform(16))

        _, target = dataset[0]

        assert target == -1

    def test_undecodable_bytes_raise_trainer_error(self, tmp_path):
        path = tmp_path / "c" / "broken.jpg"
        path.parent.mkdir()
        path.write_bytes(b"not really a jpeg")
        dataset = ImageBytesDataset([load_image_bytes(ImageRecord(str(path), "c"))])

        with pytest.raises(TrainerError):
            dataset[0]

    def test_targets_length_mismatch(self, mixed_tree):
        rows = [load_image_bytes(r) for r in scan_images(mixed_tree)]

        with pytest.raises(ValueError):
            ImageBytesDataset(rows, targets=[0])
