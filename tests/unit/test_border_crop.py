"""Tests for black border detection and removal."""

import numpy as np
import pytest

from nine_grid.models import CropBounds
from nine_grid.exceptions import ValidationError
from nine_grid.processors import (
    BorderCropProcessor,
    content_mask,
    crop_to_bounds,
    find_crop_bounds,
    remove_black_borders,
)
from nine_grid.config import ProcessingOptions


def test_fully_black_cell_keeps_full_bounds(black_cell):
    """An all-black cell is returned uncropped, never collapsed."""
    for sensitivity in (0, 20, 60):
        bounds = find_crop_bounds(black_cell, sensitivity)
        assert bounds == CropBounds(top=0, left=0, bottom=300, right=300)


def test_near_black_cell_falls_back_under_threshold():
    cell = np.full((40, 50, 3), 15, dtype=np.uint8)
    assert find_crop_bounds(cell, 20) == CropBounds.full(50, 40)


def test_single_pixel_gives_one_by_one_crop():
    cell = np.zeros((40, 50, 3), dtype=np.uint8)
    cell[13, 7] = (0, 0, 200)

    bounds = find_crop_bounds(cell, 20)

    assert bounds == CropBounds(top=13, left=7, bottom=14, right=8)
    assert crop_to_bounds(cell, bounds).shape == (1, 1, 3)


def test_black_requires_all_channels_at_or_below_threshold():
    cell = np.zeros((10, 10, 3), dtype=np.uint8)
    cell[2, 3] = (20, 20, 20)   # black at sensitivity 20
    cell[6, 8] = (0, 21, 0)     # one channel above threshold is content

    mask = content_mask(cell, 20)

    assert not mask[2, 3]
    assert mask[6, 8]
    assert find_crop_bounds(cell, 20) == CropBounds(top=6, left=8, bottom=7, right=9)


def test_framed_content_is_trimmed():
    cell = np.zeros((100, 120, 3), dtype=np.uint8)
    cell[10:90, 25:100] = (90, 140, 200)

    cropped, analysis = remove_black_borders(cell, 20, return_analysis=True)

    assert cropped.shape == (80, 75, 3)
    assert analysis["crop_bounds"] == CropBounds(top=10, left=25, bottom=90, right=100)
    assert analysis["margins_removed"] == {"top": 10, "bottom": 10, "left": 25, "right": 20}
    assert analysis["fully_black"] is False
    assert np.all(cropped == (90, 140, 200))


def test_content_touching_edges_is_not_cropped():
    cell = np.zeros((30, 30, 3), dtype=np.uint8)
    cell[0, 5] = 255
    cell[29, 20] = 255
    cell[12, 0] = 255
    cell[17, 29] = 255

    assert find_crop_bounds(cell, 20) == CropBounds.full(30, 30)


def test_bounds_span_scattered_content():
    cell = np.zeros((60, 60, 3), dtype=np.uint8)
    cell[5, 40] = 255
    cell[50, 10] = 255

    assert find_crop_bounds(cell, 0) == CropBounds(top=5, left=10, bottom=51, right=41)


def test_sensitivity_zero_treats_any_nonzero_channel_as_content():
    cell = np.zeros((8, 8, 3), dtype=np.uint8)
    cell[4, 4] = (1, 0, 0)

    assert find_crop_bounds(cell, 0) == CropBounds(top=4, left=4, bottom=5, right=5)
    assert find_crop_bounds(cell, 1) == CropBounds.full(8, 8)


def test_alpha_channel_is_ignored():
    cell = np.zeros((20, 20, 4), dtype=np.uint8)
    cell[:, :, 3] = 255
    assert find_crop_bounds(cell, 20) == CropBounds.full(20, 20)

    cell[5:10, 6:9, :3] = 200
    assert find_crop_bounds(cell, 20) == CropBounds(top=5, left=6, bottom=10, right=9)


def test_grayscale_cell():
    cell = np.zeros((20, 30), dtype=np.uint8)
    cell[3:7, 11:15] = 180

    bounds = find_crop_bounds(cell, 20)

    assert bounds == CropBounds(top=3, left=11, bottom=7, right=15)
    assert crop_to_bounds(cell, bounds).shape == (4, 4)


def test_single_channel_cell_is_grayscale():
    cell = np.zeros((10, 10, 1), dtype=np.uint8)
    cell[3, 4] = 200

    assert find_crop_bounds(cell, 20) == CropBounds(top=3, left=4, bottom=4, right=5)


@pytest.mark.parametrize("channels", [2, 5])
def test_unsupported_channel_counts_are_rejected(channels):
    """Gray plus alpha is not a supported layout; opaque alpha must not pass as content."""
    cell = np.zeros((10, 10, channels), dtype=np.uint8)
    cell[:, :, -1] = 255
    cell[3, 4, 0] = 200

    with pytest.raises(ValidationError, match="channels"):
        find_crop_bounds(cell, 20)
    with pytest.raises(ValidationError, match="channels"):
        BorderCropProcessor().process(cell)


def test_bounds_are_idempotent():
    rng = np.random.default_rng(7)
    cell = rng.integers(0, 80, size=(64, 48, 3), dtype=np.uint8)

    first = find_crop_bounds(cell, 40)
    second = find_crop_bounds(cell, 40)

    assert first == second


def test_higher_sensitivity_never_grows_the_box():
    rng = np.random.default_rng(3)
    cell = np.zeros((80, 80, 3), dtype=np.uint8)
    cell[10:70, 10:70] = rng.integers(0, 70, size=(60, 60, 3), dtype=np.uint8)
    cell[40, 40] = 255  # keeps content present at every threshold

    previous = None
    for sensitivity in range(0, 61, 5):
        bounds = find_crop_bounds(cell, sensitivity)
        if previous is not None:
            assert bounds.area <= previous.area
            assert previous.top <= bounds.top and bounds.bottom <= previous.bottom
            assert previous.left <= bounds.left and bounds.right <= previous.right
        previous = bounds


def test_crop_returns_a_copy():
    cell = np.zeros((10, 10, 3), dtype=np.uint8)
    cell[2:8, 2:8] = 100

    cropped = remove_black_borders(cell, 20)
    cropped[:] = 0

    assert np.all(cell[2:8, 2:8] == 100)


def test_crop_to_bounds_rejects_out_of_range():
    cell = np.zeros((10, 10, 3), dtype=np.uint8)
    with pytest.raises(ValueError):
        crop_to_bounds(cell, CropBounds(top=0, left=0, bottom=11, right=10))


def test_invalid_input_is_rejected():
    with pytest.raises(ValidationError):
        find_crop_bounds(np.zeros((0, 0, 3), dtype=np.uint8), 20)
    with pytest.raises(ValidationError):
        find_crop_bounds(np.zeros((4, 4, 3), dtype=np.float32), 20)
    with pytest.raises(ValueError):
        content_mask(np.zeros((4, 4, 3), dtype=np.uint8), -1)


def test_processor_uses_configured_sensitivity():
    cell = np.zeros((20, 20, 3), dtype=np.uint8)
    cell[5:15, 5:15] = 30

    processor = BorderCropProcessor(ProcessingOptions(sensitivity=40))
    assert processor.process(cell).shape == (20, 20, 3)  # all black at 40

    processor = BorderCropProcessor(ProcessingOptions(sensitivity=20))
    assert processor.process(cell).shape == (10, 10, 3)

    assert BorderCropProcessor().process(cell, sensitivity=10).shape == (10, 10, 3)
