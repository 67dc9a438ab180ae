"""
Pytest configuration and shared fixtures for nine-grid slicer tests.

Provides synthetic composites, temporary directories and quiet logging
for all test modules.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, Tuple
import numpy as np
import cv2

from nine_grid.utils.logging_utils import setup_logging

# BGR colors
GRAY = (128, 128, 128)
RED = (0, 0, 255)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def gray_composite() -> np.ndarray:
    """900x900 gray composite with a red 100x100 square centered in the middle cell."""
    image = np.full((900, 900, 3), GRAY, dtype=np.uint8)
    image[400:500, 400:500] = RED
    return image


@pytest.fixture
def framed_composite() -> np.ndarray:
    """600x600 composite where every cell has a 20px black frame around gray content."""
    return create_framed_composite(cell=200, frame=20)


@pytest.fixture
def black_cell() -> np.ndarray:
    """A fully black 300x300 cell."""
    return np.zeros((300, 300, 3), dtype=np.uint8)


@pytest.fixture
def composite_png(framed_composite: np.ndarray) -> bytes:
    """Lossless encoding of the framed composite."""
    ok, buffer = cv2.imencode(".png", framed_composite)
    assert ok
    return buffer.tobytes()


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests."""
    setup_logging(
        level="WARNING",  # Only show warnings and errors in tests
        use_rich=False,   # Disable rich formatting for cleaner test output
        format_style="minimal"
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (deselect with '-m \"not unit\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and name."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)

        if "slow" in item.name.lower() or "parallel" in item.name.lower():
            item.add_marker(pytest.mark.slow)


# Helper functions for tests
def create_framed_composite(
    cell: int = 200,
    frame: int = 20,
    content_color: Tuple[int, int, int] = GRAY
) -> np.ndarray:
    """Create a 3x3 composite whose cells carry a black frame of ``frame`` px."""
    size = cell * 3
    image = np.zeros((size, size, 3), dtype=np.uint8)
    for row in range(3):
        for col in range(3):
            y, x = row * cell, col * cell
            cv2.rectangle(
                image,
                (x + frame, y + frame),
                (x + cell - frame - 1, y + cell - frame - 1),
                content_color,
                thickness=-1,
            )
    return image

