"""Base processor class and common utilities for nine-grid processors."""

from typing import Any, Optional
import numpy as np
from abc import ABC, abstractmethod

from ..exceptions import ValidationError


class BaseProcessor(ABC):
    """Base class for all image processors."""

    def __init__(self, config: Optional[Any] = None):
        """Initialize processor with optional configuration."""
        self.config = config

    def get_config_value(self, key: str, default: Any) -> Any:
        """Safely get a config value with a default."""
        if self.config is None:
            return default
        return getattr(self.config, key, default)

    @abstractmethod
    def process(self, image: np.ndarray, **kwargs) -> Any:
        """Process an image. Must be implemented by subclasses."""
        pass

    def validate_image(self, image: np.ndarray) -> None:
        """Validate that the input is a valid raster."""
        validate_raster(image, processor=type(self).__name__)


def validate_raster(image: np.ndarray, processor: Optional[str] = None) -> None:
    """Check that ``image`` is a non-empty 8-bit gray, BGR or BGRA array.

    Raises:
        ValidationError: If the raster cannot be processed
    """
    details = {"processor": processor} if processor else None
    if image is None:
        raise ValidationError("Image cannot be None", details)
    if not isinstance(image, np.ndarray):
        raise ValidationError("Image must be a numpy array", details)
    if image.size == 0:
        raise ValidationError("Image cannot be empty", details)
    if image.ndim not in (2, 3):
        raise ValidationError(f"Image must be 2D or 3D, got {image.ndim} dimensions", details)
    if image.dtype != np.uint8:
        raise ValidationError(f"Image must be uint8, got {image.dtype}", details)
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise ValidationError(
            f"Image must have 1, 3 or 4 channels, got {image.shape[2]}", details
        )
