"""
Tests for folder_classifier/config/settings.py
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from folder_classifier.config import (
    DataConfig,
    PipelineConfig,
    TrainerConfig,
    get_config,
    load_config,
)


class TestDefaults:
    """Defaults reproduce a plain training run."""

    def test_default_paths_and_split(self):
        config = PipelineConfig()

        assert config.data.data_dir == "./data"
        assert config.data.label_from_parent_folder is True
        assert config.data.test_fraction == 0.2
        assert config.data.seed == 1
        assert config.output.model_path == "./model.pt"
        assert Path(config.sample_image_path()) == Path("./data") / "sample.png"

    def test_absolute_sample_path_is_kept(self, tmp_path):
        sample = tmp_path / "elsewhere.png"
        config = get_config(data={"sample_image": str(sample)})

        assert config.sample_image_path() == str(sample)

    def test_to_dict_sections(self):
        assert set(PipelineConfig().to_dict()) == {"data", "trainer", "output"}


class TestValidation:
    """Field validation."""

    @pytest.mark.parametrize("fraction", [-0.1, 1.0, 1.5])
    def test_bad_test_fraction(self, fraction):
        with pytest.raises(ValidationError):
            DataConfig(test_fraction=fraction)

    def test_bad_device(self):
        with pytest.raises(ValidationError):
            TrainerConfig(device="tpu")

    def test_device_is_lowercased(self):
        assert TrainerConfig(device="CPU").device == "cpu"

    def test_bad_epochs(self):
        with pytest.raises(ValidationError):
            TrainerConfig(epochs=0)


class TestEnvironment:
    """FC_ environment overrides."""

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("FC_DATA__DATA_DIR", "/srv/images")
        monkeypatch.setenv("FC_TRAINER__EPOCHS", "3")

        config = PipelineConfig()

        assert config.data.data_dir == "/srv/images"
        assert config.trainer.epochs == 3


class TestLoadConfig:
    """YAML loading."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "data:\n"
            "  data_dir: ./flowers\n"
            "  test_fraction: 0.25\n"
            "trainer:\n"
            "  architecture: resnet18\n"
            "  epochs: 2\n"
            "output:\n"
            "  model_path: ./out/flowers.pt\n"
        )

        config = load_config(path)

        assert config.data.data_dir == "./flowers"
        assert config.data.test_fraction == 0.25
        assert config.trainer.architecture == "resnet18"
        assert config.trainer.epochs == 2
        assert config.output.model_path == "./out/flowers.pt"
        assert config.trainer.batch_size == 10

    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLOWERS_ROOT", "/mnt/flowers")
        monkeypatch.delenv("MODEL_OUT", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            "data:\n"
            "  data_dir: ${FLOWERS_ROOT}\n"
            "output:\n"
            "  model_path: ${MODEL_OUT:-./default.pt}\n"
        )

        config = load_config(path)

        assert config.data.data_dir == "/mnt/flowers"
        assert config.output.model_path == "./default.pt"

    def test_missing_env_var_without_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("data:\n  data_dir: ${NOT_SET_ANYWHERE}\n")

        with pytest.raises(ValueError):
            load_config(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path).data.data_dir == "./data"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_example_config(self, monkeypatch):
        monkeypatch.delenv("FLOWERS_ROOT", raising=False)
        path = Path(__file__).parent.parent / "examples" / "flowers.yaml"

        config = load_config(path)

        assert config.data.data_dir == "./data/flowers"
        assert config.trainer.architecture == "efficientnet_b0"
        assert config.trainer.augment is True
