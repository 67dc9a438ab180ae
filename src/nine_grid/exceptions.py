"""
Custom exceptions for the nine-grid slicer.

Provides a hierarchy of exceptions for the errors that can occur while
decoding a composite, slicing it into cells and encoding the results.
"""

from typing import Optional, Any


class NineGridError(Exception):
    """Base exception for all nine-grid slicer errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ConfigurationError(NineGridError):
    """Raised when there are configuration-related errors."""
    pass


class ValidationError(NineGridError):
    """Raised when an input raster is missing, empty or too small to slice."""
    pass


class ProcessingError(NineGridError):
    """Raised when image processing operations fail."""

    def __init__(self, message: str, processor: Optional[str] = None,
                 image_path: Optional[str] = None, **kwargs: Any) -> None:
        details = kwargs
        if processor:
            details["processor"] = processor
        if image_path:
            details["image_path"] = image_path
        super().__init__(message, details)


class ImageDecodeError(ProcessingError):
    """Raised when source bytes cannot be decoded into a raster.

    Fatal for a run: no slices are produced.
    """
    pass


class ImageEncodeError(ProcessingError):
    """Raised when a single cell cannot be encoded to output bytes.

    The pipeline records the cell index as skipped and keeps going.
    """

    def __init__(self, message: str, index: Optional[int] = None, **kwargs: Any) -> None:
        if index is not None:
            kwargs["index"] = index
        super().__init__(message, **kwargs)
        self.index = index


class ImageSaveError(ProcessingError):
    """Raised when an exported slice cannot be written to disk."""
    pass
