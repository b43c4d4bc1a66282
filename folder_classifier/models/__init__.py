"""Model backbones for Folder Classifier."""

from .classification import ARCHITECTURE_ALIASES, create_classifier, resolve_architecture

__all__ = ["ARCHITECTURE_ALIASES", "create_classifier", "resolve_architecture"]
