"""Nine-grid composite slicer with black border removal."""

__version__ = "1.0.0"
__author__ = "Nine Grid Team"

from .models import CropBounds, ProcessedSlice, SliceRun
from .pipeline import NineGridPipeline, export_slices, slice_nine_grid

__all__ = [
    "CropBounds",
    "ProcessedSlice",
    "SliceRun",
    "NineGridPipeline",
    "export_slices",
    "slice_nine_grid",
]
