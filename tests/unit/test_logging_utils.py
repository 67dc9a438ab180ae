"""Tests for logging setup and run statistics."""

import logging

import pytest

from nine_grid.utils import log_processing_stats, setup_logging


def test_setup_logging_only_configures_root():
    library_logger = logging.getLogger("PIL")
    library_logger.setLevel(logging.NOTSET)

    root = setup_logging(level="debug", use_rich=False, format_style="simple")

    assert root is logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert library_logger.level == logging.NOTSET


def test_log_file_receives_debug_records(temp_dir):
    log_file = temp_dir / "logs" / "slicer.log"
    root = setup_logging(level="WARNING", log_file=log_file, use_rich=False)

    logging.getLogger("nine_grid.test").debug("cell trimmed")
    for handler in root.handlers:
        handler.flush()
        handler.close()

    assert "cell trimmed" in log_file.read_text(encoding="utf-8")


def test_processing_stats_are_logged(caplog):
    logger = logging.getLogger("nine_grid.test")

    with caplog.at_level(logging.INFO, logger="nine_grid.test"):
        with log_processing_stats("slicing", logger) as stats:
            stats["slices_encoded"] = 9

    assert "duration" in stats
    assert "Completed slicing" in caplog.text


def test_processing_stats_reraise_failures(caplog):
    logger = logging.getLogger("nine_grid.test")

    with caplog.at_level(logging.INFO, logger="nine_grid.test"):
        with pytest.raises(RuntimeError):
            with log_processing_stats("slicing", logger):
                raise RuntimeError("codec exploded")

    assert "Failed slicing" in caplog.text
