"""
Pydantic-based configuration system for Folder Classifier.

Supports:
- YAML config files with environment variable interpolation
- Hierarchical configuration (data, trainer, output)
- Environment variable overrides (FC_ prefix, __ for nesting)
- Defaults that reproduce a plain `folder-classifier train` run

Usage:
    from folder_classifier.config import load_config, PipelineConfig

    # Load from YAML
    config = load_config("configs/flowers.yaml")

    # Or create programmatically
    config = PipelineConfig(
        data=DataConfig(data_dir="./flowers", test_fraction=0.25),
        trainer=TrainerConfig(architecture="resnet18", epochs=5),
        output=OutputConfig(model_path="./flowers.pt"),
    )
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataConfig(BaseModel):
    """Where the images live and how they are split."""

    data_dir: str = Field(
        default="./data",
        description="Root directory with one subfolder per class"
    )
    label_from_parent_folder: bool = Field(
        default=True,
        description="Label images by folder name (False: by file name)"
    )
    sample_image: str = Field(
        default="sample.png",
        description="Smoke-test image, relative to data_dir unless absolute"
    )
    test_fraction: float = Field(
        default=0.2,
        description="Share of images held out for evaluation"
    )
    seed: int = Field(
        default=1,
        description="Seed for the train/test split"
    )

    @field_validator("test_fraction")
    @classmethod
    def validate_test_fraction(cls, v: float) -> float:
        if not 0.0 <= v < 1.0:
            raise ValueError("test_fraction must be in [0, 1)")
        return v


class TrainerConfig(BaseModel):
    """Backbone and training hyperparameters."""

    architecture: str = Field(
        default="resnet50",
        description="timm model name (resnet50, efficientnet_b0, mobilenetv3_small_100, etc.)"
    )
    pretrained: bool = Field(
        default=True,
        description="Start from pretrained ImageNet weights"
    )
    epochs: int = Field(
        default=10,
        ge=1,
        description="Number of training epochs"
    )
    batch_size: int = Field(
        default=10,
        ge=1,
        description="Training batch size"
    )
    learning_rate: float = Field(
        default=0.001,
        gt=0.0,
        description="Adam learning rate"
    )
    image_size: int = Field(
        default=224,
        ge=8,
        description="Square input size images are resized to"
    )
    augment: bool = Field(
        default=False,
        description="Apply flip/rotation/color augmentation while training"
    )
    device: str = Field(
        default="auto",
        description="Device: auto, cuda, mps, cpu"
    )
    seed: int = Field(
        default=1,
        description="Seed for weight init and batch shuffling"
    )

    @field_validator("device")
    @classmethod
    def validate_device(cls, v: str) -> str:
        valid_devices = ["auto", "cuda", "mps", "cpu"]
        if v.lower() not in valid_devices:
            raise ValueError(f"device must be one of {valid_devices}")
        return v.lower()


class OutputConfig(BaseModel):
    """Where the trained model goes."""

    model_config = ConfigDict(protected_namespaces=())

    model_path: str = Field(
        default="./model.pt",
        description="Model artifact path, overwritten on every run"
    )


class PipelineConfig(BaseSettings):
    """
    Main configuration class for Folder Classifier.

    Combines all configuration sections and supports:
    - Loading from YAML files
    - Environment variable overrides
    - Programmatic configuration
    """

    model_config = SettingsConfigDict(
        env_prefix="FC_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    data: DataConfig = Field(default_factory=DataConfig)
    trainer: TrainerConfig = Field(default_factory=TrainerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def sample_image_path(self) -> str:
        """Resolve the smoke-test image against the data directory."""
        sample = Path(self.data.sample_image)
        if sample.is_absolute():
            return str(sample)
        return str(Path(self.data.data_dir) / sample)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for logging."""
        return {
            "data": self.data.model_dump(),
            "trainer": self.trainer.model_dump(),
            "output": self.output.model_dump(),
        }


_ENV_PATTERN = re.compile(r'\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}')


def _interpolate_env_vars(text: str) -> str:
    """
    Interpolate environment variables in raw config text.

    Supports formats:
    - ${VAR_NAME} - required variable
    - ${VAR_NAME:-default} - variable with default

    Only upper-case names are treated as environment variables, so
    OmegaConf references such as ${data.data_dir} are left for OmegaConf.
    """
    def replace(match):
        var_name = match.group(1)
        default = match.group(2)
        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            raise ValueError(f"Environment variable {var_name} not set and no default provided")

    return _ENV_PATTERN.sub(replace, text)


def load_config(config_path: Union[str, Path]) -> PipelineConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        PipelineConfig instance

    Example:
        config = load_config("configs/flowers.yaml")
    """
    from omegaconf import OmegaConf

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    text = _interpolate_env_vars(config_path.read_text(encoding="utf-8"))
    config_dict = OmegaConf.to_container(OmegaConf.create(text), resolve=True) or {}

    return PipelineConfig(**config_dict)


def get_config(**kwargs) -> PipelineConfig:
    """
    Create configuration programmatically.

    Example:
        config = get_config(
            data={"data_dir": "./flowers"},
            trainer={"architecture": "resnet18", "epochs": 3},
        )
    """
    return PipelineConfig(
        data=DataConfig(**kwargs.get("data", {})),
        trainer=TrainerConfig(**kwargs.get("trainer", {})),
        output=OutputConfig(**kwargs.get("output", {})),
    )
