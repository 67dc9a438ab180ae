"""Black border detection and removal for grid cells."""

from typing import Any, Dict, Optional, Tuple, Union
import logging

import numpy as np

from .base import BaseProcessor, validate_raster
from ..models import CropBounds

logger = logging.getLogger(__name__)


class BorderCropProcessor(BaseProcessor):
    """Processor for trimming uniform dark borders from a cell.

    ``config`` is expected to carry a ``sensitivity`` attribute, e.g. a
    :class:`~nine_grid.config.ProcessingOptions`.
    """

    def process(
        self,
        image: np.ndarray,
        sensitivity: Optional[int] = None,
        return_analysis: bool = False,
        **kwargs
    ) -> Union[np.ndarray, Tuple[np.ndarray, Dict[str, Any]]]:
        """Crop ``image`` to its non-black content.

        Args:
            image: Cell raster
            sensitivity: Per-channel threshold; defaults to the configured one
            return_analysis: If True, also return crop details

        Returns:
            Cropped image or (cropped_image, analysis) if return_analysis=True
        """
        self.validate_image(image)
        if sensitivity is None:
            sensitivity = self.get_config_value('sensitivity', 20)
        return remove_black_borders(image, sensitivity, return_analysis=return_analysis)


def content_mask(image: np.ndarray, sensitivity: int) -> np.ndarray:
    """Return a boolean (H, W) mask that is True for non-black pixels.

    A pixel is black iff its red, green and blue values are all <= sensitivity,
    so any single channel above the threshold makes it content. Alpha and any
    channel past the third are ignored. Grayscale values stand for all three.
    """
    if not 0 <= sensitivity <= 255:
        raise ValueError(f"Sensitivity must be within [0, 255], got {sensitivity}")

    if image.ndim == 2:
        return image > sensitivity
    return np.any(image[:, :, :3] > sensitivity, axis=2)


def _first_true(flags: np.ndarray) -> int:
    return int(np.argmax(flags))


def _last_true(flags: np.ndarray) -> int:
    return len(flags) - 1 - int(np.argmax(flags[::-1]))


def find_crop_bounds(image: np.ndarray, sensitivity: int) -> CropBounds:
    """Find the tightest rectangle holding all non-black content of a cell.

    Rows are resolved first across the full width: ``top`` is the first row
    with content and ``bottom`` is one past the last. Columns are then
    resolved only within [top, bottom). If the cell holds no content at all
    the full cell is returned, never an empty rectangle.

    Args:
        image: Cell raster (H, W), (H, W, 3) or (H, W, 4)
        sensitivity: Per-channel black threshold

    Returns:
        CropBounds in cell coordinates
    """
    validate_raster(image, processor="BorderCrop")

    height, width = image.shape[:2]
    mask = content_mask(image, sensitivity)

    rows_with_content = mask.any(axis=1)
    if not rows_with_content.any():
        return CropBounds.full(width, height)

    top = _first_true(rows_with_content)
    bottom = _last_true(rows_with_content) + 1

    cols_with_content = mask[top:bottom].any(axis=0)
    left = _first_true(cols_with_content)
    right = _last_true(cols_with_content) + 1

    bounds = CropBounds(top=top, left=left, bottom=bottom, right=right)
    if bounds.is_empty:
        return CropBounds.full(width, height)
    return bounds


def crop_to_bounds(image: np.ndarray, bounds: CropBounds) -> np.ndarray:
    """Copy the [top, bottom) x [left, right) region into a new raster."""
    h, w = image.shape[:2]
    if not (0 <= bounds.top < bounds.bottom <= h and 0 <= bounds.left < bounds.right <= w):
        raise ValueError(f"Crop bounds {bounds.as_tuple()} outside image of size {w}x{h}")
    return image[bounds.top:bounds.bottom, bounds.left:bounds.right].copy()


def remove_black_borders(
    image: np.ndarray,
    sensitivity: int = 20,
    return_analysis: bool = False,
) -> Union[np.ndarray, Tuple[np.ndarray, Dict[str, Any]]]:
    """Trim dark borders from a cell.

    Args:
        image: Cell raster
        sensitivity: Per-channel black threshold
        return_analysis: If True, returns additional analysis information

    Returns:
        Cropped image or tuple with analysis if return_analysis=True
    """
    bounds = find_crop_bounds(image, sensitivity)
    crop = crop_to_bounds(image, bounds)

    h, w = image.shape[:2]
    fully_black = bounds.is_full(w, h) and not content_mask(image, sensitivity).any()
    if fully_black:
        logger.debug(f"Cell {w}x{h} is entirely black at sensitivity {sensitivity}; keeping it uncropped")

    if not return_analysis:
        return crop

    original_area = h * w
    analysis = {
        "sensitivity": sensitivity,
        "original_shape": image.shape,
        "cropped_shape": crop.shape,
        "crop_bounds": bounds,
        "margins_removed": {
            "top": bounds.top,
            "bottom": h - bounds.bottom,
            "left": bounds.left,
            "right": w - bounds.right,
        },
        "area_retention": bounds.area / original_area if original_area > 0 else 0,
        "fully_black": fully_black,
    }
    return crop, analysis
