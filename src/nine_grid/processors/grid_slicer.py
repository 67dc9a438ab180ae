"""Splitting of a 3x3 composite image into its nine cells."""

from typing import List, Tuple
import logging

import numpy as np

from .base import BaseProcessor, validate_raster
from ..exceptions import ValidationError
from ..models import GRID_SIZE

logger = logging.getLogger(__name__)


class GridSlicerProcessor(BaseProcessor):
    """Processor for cutting a composite into 9 equal cells."""

    def process(self, image: np.ndarray, **kwargs) -> List[np.ndarray]:
        """Slice ``image`` into 9 cells in row-major order."""
        self.validate_image(image)
        return slice_grid(image)


def cell_size(width: int, height: int) -> Tuple[int, int]:
    """Return (cell_width, cell_height); remainder pixels are dropped."""
    return width // GRID_SIZE, height // GRID_SIZE


def grid_cell_rect(row: int, col: int, cell_w: int, cell_h: int) -> Tuple[int, int, int, int]:
    """Return (x, y, w, h) of cell (row, col) in source coordinates."""
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise ValueError(f"Cell position out of range: ({row}, {col})")
    return col * cell_w, row * cell_h, cell_w, cell_h


def extract_cell(image: np.ndarray, row: int, col: int) -> np.ndarray:
    """Copy out a single cell of the composite."""
    h, w = image.shape[:2]
    cell_w, cell_h = cell_size(w, h)
    x, y, cw, ch = grid_cell_rect(row, col, cell_w, cell_h)
    # Copy so the cell never aliases the source buffer
    return image[y:y + ch, x:x + cw].copy()


def slice_grid(image: np.ndarray) -> List[np.ndarray]:
    """Split a composite into 9 cells.

    Cell (r, c) covers rows [r*cell_h, (r+1)*cell_h) and columns
    [c*cell_w, (c+1)*cell_w) with cell_w = W // 3 and cell_h = H // 3.
    Leftover pixels on the right and bottom edges are discarded.

    Args:
        image: Source raster, at least 3x3 pixels

    Returns:
        List of 9 independent rasters, index = row * 3 + col

    Raises:
        ValidationError: If the source is smaller than 3x3
    """
    validate_raster(image, processor="GridSlicer")

    h, w = image.shape[:2]
    if w < GRID_SIZE or h < GRID_SIZE:
        raise ValidationError(
            f"Image too small to slice into a {GRID_SIZE}x{GRID_SIZE} grid",
            {"width": w, "height": h},
        )

    cell_w, cell_h = cell_size(w, h)
    if w % GRID_SIZE or h % GRID_SIZE:
        logger.debug(
            f"Dropping remainder pixels: {w % GRID_SIZE} columns, {h % GRID_SIZE} rows"
        )

    return [
        extract_cell(image, row, col)
        for row in range(GRID_SIZE)
        for col in range(GRID_SIZE)
    ]
