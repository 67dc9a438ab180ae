"""Nine-Grid Processors Module.

This module provides the image processing components of the slicer:
decoding and encoding, splitting a composite into cells and trimming
black borders from each cell.
"""

# Base processor
from .base import BaseProcessor, validate_raster

# Image I/O
from .image_io import (
    DEFAULT_JPEG_QUALITY,
    decode_image,
    encode_image,
    load_image,
    save_bytes,
    get_image_files,
)

# Grid slicing
from .grid_slicer import (
    GridSlicerProcessor,
    cell_size,
    grid_cell_rect,
    extract_cell,
    slice_grid,
)

# Border removal
from .border_crop import (
    BorderCropProcessor,
    content_mask,
    find_crop_bounds,
    crop_to_bounds,
    remove_black_borders,
)

__all__ = [
    # Base
    "BaseProcessor",
    "validate_raster",

    # Image I/O
    "DEFAULT_JPEG_QUALITY",
    "decode_image",
    "encode_image",
    "load_image",
    "save_bytes",
    "get_image_files",

    # Grid slicing
    "GridSlicerProcessor",
    "cell_size",
    "grid_cell_rect",
    "extract_cell",
    "slice_grid",

    # Border removal
    "BorderCropProcessor",
    "content_mask",
    "find_crop_bounds",
    "crop_to_bounds",
    "remove_black_borders",
]
