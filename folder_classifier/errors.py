"""
Error types for Folder Classifier.

Every failure aborts the run; nothing here is retried. The CLI is the only
place these are caught, to turn them into a non-zero exit code.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class FileSystemError(PipelineError, OSError):
    """A directory, image or model file is missing or unreadable."""


class EmptyDatasetError(PipelineError, ValueError):
    """The data directory holds no qualifying images."""


class TrainerError(PipelineError, RuntimeError):
    """The training backend failed to fit, evaluate, save or load a model."""
