"""Value types produced by the grid slicer and border cropper."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .config.models import ProcessingOptions

GRID_SIZE = 3
CELL_COUNT = GRID_SIZE * GRID_SIZE


@dataclass(frozen=True)
class CropBounds:
    """Half-open rectangle [top, bottom) x [left, right) in cell coordinates."""

    top: int
    left: int
    bottom: int
    right: int

    @classmethod
    def full(cls, width: int, height: int) -> "CropBounds":
        """Bounds covering a whole width x height raster."""
        return cls(top=0, left=0, bottom=height, right=width)

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def is_empty(self) -> bool:
        return self.right <= self.left or self.bottom <= self.top

    def is_full(self, width: int, height: int) -> bool:
        return self == CropBounds.full(width, height)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.top, self.left, self.bottom, self.right)


@dataclass(frozen=True)
class ProcessedSlice:
    """One encoded grid cell, after optional border removal."""

    index: int
    data: bytes = field(repr=False)
    width: int
    height: int
    bounds: Optional[CropBounds] = None

    @property
    def row(self) -> int:
        return self.index // GRID_SIZE

    @property
    def col(self) -> int:
        return self.index % GRID_SIZE

    @property
    def number(self) -> int:
        """1-based position used when naming exported files."""
        return self.index + 1

    @property
    def filename(self) -> str:
        return f"slice_{self.number}.jpg"


@dataclass
class SliceRun:
    """Ordered result of processing one composite image."""

    slices: List[ProcessedSlice]
    source_width: int
    source_height: int
    options: ProcessingOptions
    skipped: List[int] = field(default_factory=list)

    @property
    def cell_size(self) -> Tuple[int, int]:
        return self.source_width // GRID_SIZE, self.source_height // GRID_SIZE

    @property
    def complete(self) -> bool:
        """True when every cell was encoded."""
        return not self.skipped and len(self.slices) == CELL_COUNT

    def get(self, index: int) -> Optional[ProcessedSlice]:
        for item in self.slices:
            if item.index == index:
                return item
        return None

    def __len__(self) -> int:
        return len(self.slices)

    def __iter__(self) -> Iterator[ProcessedSlice]:
        return iter(self.slices)
