"""Configuration module for Folder Classifier."""

from .settings import (
    DataConfig,
    TrainerConfig,
    OutputConfig,
    PipelineConfig,
    load_config,
    get_config,
)

__all__ = [
    "DataConfig",
    "TrainerConfig",
    "OutputConfig",
    "PipelineConfig",
    "load_config",
    "get_config",
]
