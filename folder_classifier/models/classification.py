"""
Classification backbones for Folder Classifier.

Supports any timm architecture; common short names are aliased:
- ResNet family (resnet18, resnet34, resnet50, resnet101)
- EfficientNet family (efficientnet_b0 through efficientnet_b4)
- Vision Transformers (vit_tiny, vit_small, vit_base)
- MobileNet family (mobilenet_v2, mobilenet_v3_small, mobilenet_v3_large)
"""

import timm
import torch.nn as nn

from ..errors import TrainerError

# Architecture mapping for common naming variations
ARCHITECTURE_ALIASES = {
    'vit_tiny': 'vit_tiny_patch16_224',
    'vit_small': 'vit_small_patch16_224',
    'vit_base': 'vit_base_patch16_224',
    'mobilenet_v2': 'mobilenetv2_100',
    'mobilenet_v3_small': 'mobilenetv3_small_100',
    'mobilenet_v3_large': 'mobilenetv3_large_100',
}


def resolve_architecture(name: str) -> str:
    """Map a short architecture name to its timm name."""
    return ARCHITECTURE_ALIASES.get(name, name)


def create_classifier(
    architecture: str = "resnet50",
    num_classes: int = 2,
    pretrained: bool = True,
) -> nn.Module:
    """
    Build a transfer-learning classifier with a fresh head.

    Args:
        architecture: timm model name or alias
        num_classes: Number of output classes
        pretrained: Load pretrained ImageNet weights for the backbone

    Returns:
        PyTorch model producing (batch, num_classes) logits

    Raises:
        TrainerError: If the architecture is unknown or weights cannot be loaded

    Example:
        model = create_classifier("resnet18", num_classes=3, pretrained=False)
    """
    if num_classes < 1:
        raise TrainerError(f"num_classes must be positive, got {num_classes}")

    timm_arch = resolve_architecture(architecture)
    try:
        return timm.create_model(timm_arch, pretrained=pretrained, num_classes=num_classes)
    except (RuntimeError, ValueError, OSError) as e:
        raise TrainerError(f"Cannot create model '{architecture}': {e}") from e
