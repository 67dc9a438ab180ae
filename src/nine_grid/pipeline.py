"""Nine-grid slicing pipeline: decode, slice, trim, encode and export."""

import argparse
import logging
import sys
import traceback
from multiprocessing import Pool, cpu_count
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from tqdm import tqdm

from .config import (
    Config,
    ProcessingOptions,
    build_options,
    get_default_config,
    load_config,
    update_config,
)
from .exceptions import ConfigurationError, ImageEncodeError, NineGridError
from .models import CELL_COUNT, CropBounds, ProcessedSlice, SliceRun
from .processors import (
    DEFAULT_JPEG_QUALITY,
    decode_image,
    encode_image,
    find_crop_bounds,
    crop_to_bounds,
    get_image_files,
    load_image,
    save_bytes,
    slice_grid,
    validate_raster,
)
from .utils import (
    print_bullet,
    print_error,
    print_header,
    print_info,
    print_separator,
    print_success,
    print_warning,
    setup_logging,
    log_processing_stats,
)

logger = logging.getLogger(__name__)

# (index, encoded bytes or None, width, height, bounds or None, error message or None)
CellResult = Tuple[int, Optional[bytes], int, int, Optional[CropBounds], Optional[str]]


# Module-level worker function for multiprocessing
def _process_cell(
    task: Tuple[int, np.ndarray, bool, int, int]
) -> CellResult:
    """Trim and encode a single cell.

    Encode failures are returned as a message rather than raised so that one
    bad cell never aborts its siblings, in or out of a worker process.
    """
    index, cell, remove_borders, sensitivity, quality = task

    bounds = None
    output = cell
    if remove_borders:
        bounds = find_crop_bounds(cell, sensitivity)
        output = crop_to_bounds(cell, bounds)

    height, width = output.shape[:2]
    try:
        data = encode_image(output, quality)
    except ImageEncodeError as e:
        return (index, None, width, height, bounds, str(e))
    return (index, data, width, height, bounds, None)


class NineGridPipeline:
    """Pipeline turning one composite image into nine slices."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize pipeline.

        Args:
            config: Pipeline configuration (default: built-in defaults)
        """
        self.config = config or get_default_config()
        self.slices: List[ProcessedSlice] = []
        self.last_run: Optional[SliceRun] = None

    @property
    def max_workers(self) -> int:
        # Leave one CPU for the main process
        return self.config.processing.max_workers or max(1, cpu_count() - 1)

    def reset(self) -> None:
        """Discard results of the previous run."""
        self.slices = []
        self.last_run = None

    def process_bytes(
        self,
        data: bytes,
        options: Optional[ProcessingOptions] = None
    ) -> SliceRun:
        """Decode ``data`` and slice it.

        Raises:
            ImageDecodeError: If the bytes are not an image; no slices are kept
        """
        self.reset()
        image = decode_image(data)
        return self.process_image(image, options)

    def process_file(
        self,
        image_path: Union[str, Path],
        options: Optional[ProcessingOptions] = None
    ) -> SliceRun:
        """Load an image file and slice it."""
        self.reset()
        image = load_image(image_path)
        return self.process_image(image, options)

    def process_image(
        self,
        image: np.ndarray,
        options: Optional[ProcessingOptions] = None,
        parallel: Optional[bool] = None
    ) -> SliceRun:
        """Slice a decoded composite into 9 encoded cells.

        Args:
            image: Source raster
            options: Border removal options (default: from config)
            parallel: Override ``config.processing.parallel``

        Returns:
            SliceRun whose slices are ordered by index; cells that failed to
            encode are listed in ``skipped``
        """
        self.reset()
        options = options or self.config.options
        if parallel is None:
            parallel = self.config.processing.parallel
        quality = self.config.processing.jpeg_quality

        validate_raster(image, processor="NineGridPipeline")
        height, width = image.shape[:2]
        with log_processing_stats(f"slicing {width}x{height} composite", logger,
                                  level=logging.DEBUG) as stats:
            cells = slice_grid(image)
            tasks = [
                (index, cell, options.remove_black_borders, options.sensitivity, quality)
                for index, cell in enumerate(cells)
            ]

            if parallel:
                results = self._run_parallel(tasks)
            else:
                results = [_process_cell(task) for task in tasks]

            # Collect by index, never by completion order
            by_index: Dict[int, CellResult] = {result[0]: result for result in results}
            slices = []
            skipped = []
            for index in range(CELL_COUNT):
                _, data, w, h, bounds, error = by_index[index]
                if error is not None:
                    logger.warning(f"Skipping slice {index + 1}: {error}")
                    skipped.append(index)
                    continue
                slices.append(ProcessedSlice(index=index, data=data, width=w, height=h, bounds=bounds))

            stats["slices_encoded"] = len(slices)
            stats["slices_skipped"] = len(skipped)

        run = SliceRun(
            slices=slices,
            source_width=width,
            source_height=height,
            options=options,
            skipped=skipped,
        )
        self.slices = run.slices
        self.last_run = run
        return run

    def _run_parallel(self, tasks: List[Tuple]) -> List[CellResult]:
        workers = min(self.max_workers, len(tasks))
        logger.debug(f"Processing {len(tasks)} cells using {workers} workers")
        with Pool(processes=workers) as pool:
            return pool.map(_process_cell, tasks)

    def export(self, output_dir: Union[str, Path, None] = None) -> List[Path]:
        """Write the slices of the last run to ``output_dir``."""
        if self.last_run is None:
            raise NineGridError("Nothing to export: no slices have been processed")
        target = Path(output_dir or self.config.output.output_dir)
        return export_slices(self.last_run, target, self.config.output.filename_template)

    def process_directory(
        self,
        input_dir: Union[str, Path],
        output_dir: Union[str, Path, None] = None,
        show_progress: bool = True
    ) -> Dict[str, Any]:
        """Slice every composite in ``input_dir``.

        Each composite is exported to ``output_dir/<stem>/``. A composite that
        fails to decode is recorded as failed and the batch continues.

        Returns:
            Dictionary with processing results
        """
        input_path = Path(input_dir)
        if not input_path.is_dir():
            raise ValueError(f"Input directory does not exist: {input_path}")
        output_root = Path(output_dir or self.config.output.output_dir)

        image_files = get_image_files(input_path)
        successful = []
        failed = []

        for image_file in tqdm(image_files, desc="Slicing composites", unit="img",
                               disable=not show_progress):
            try:
                run = self.process_file(image_file)
                paths = self.export(output_root / image_file.stem)
            except NineGridError as e:
                logger.error(f"Failed to process {image_file.name}: {e}")
                logger.debug(traceback.format_exc())
                failed.append({'image': str(image_file), 'error': str(e)})
                continue

            successful.append({
                'image': str(image_file),
                'outputs': [str(p) for p in paths],
                'skipped': list(run.skipped),
            })

        return {
            'successful': successful,
            'failed': failed,
            'total': len(image_files),
        }


def export_slices(
    run: SliceRun,
    output_dir: Path,
    filename_template: str = "slice_{number}.jpg"
) -> List[Path]:
    """Write each slice's encoded bytes to ``output_dir``.

    Args:
        run: Result of a processing run
        output_dir: Target directory, created if missing
        filename_template: Filename with a ``{number}`` placeholder (1-based)

    Returns:
        Written paths, in slice index order

    Raises:
        ImageSaveError: If a file cannot be written
    """
    paths = []
    for item in sorted(run.slices, key=lambda s: s.index):
        path = Path(output_dir) / filename_template.format(number=item.number, index=item.index)
        save_bytes(item.data, path)
        paths.append(path)
    logger.info(f"Exported {len(paths)} slices to {output_dir}")
    return paths


def slice_nine_grid(
    data: bytes,
    options: Optional[ProcessingOptions] = None,
    quality: int = DEFAULT_JPEG_QUALITY
) -> SliceRun:
    """Slice encoded composite bytes with default settings."""
    config = update_config(get_default_config(), "processing", jpeg_quality=quality)
    return NineGridPipeline(config).process_bytes(data, options)


def _build_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config) if args.config else get_default_config()

    overrides = {}
    if args.sensitivity is not None:
        overrides['sensitivity'] = args.sensitivity
    if args.keep_borders:
        overrides['remove_black_borders'] = False
    elif args.remove_borders:
        overrides['remove_black_borders'] = True
    if overrides:
        config.options = build_options(**{**config.options.model_dump(), **overrides})

    processing = {}
    if args.quality is not None:
        processing['jpeg_quality'] = args.quality
    if args.workers is not None:
        processing['max_workers'] = args.workers
    if args.parallel:
        processing['parallel'] = True
    elif args.no_parallel:
        processing['parallel'] = False
    update_config(config, "processing", **processing)

    if args.output:
        update_config(config, "output", output_dir=args.output)
    if args.verbose:
        update_config(config, "logging", level="DEBUG")
    elif args.quiet:
        update_config(config, "logging", level="WARNING")
    return config


def main(argv: Optional[List[str]] = None) -> None:
    """Command line interface."""
    parser = argparse.ArgumentParser(
        description="Split a 3x3 composite image into nine slices"
    )
    parser.add_argument("input", help="Composite image file or directory of composites")
    parser.add_argument("-o", "--output", help="Output directory (default: use config)")
    parser.add_argument("-c", "--config", help="Configuration file (JSON, YAML or TOML)")
    parser.add_argument("-s", "--sensitivity", type=int,
                        help="Black threshold per channel, 0-60 (default: use config)")
    parser.add_argument("--keep-borders", action="store_true", help="Disable black border removal")
    parser.add_argument("--remove-borders", action="store_true", help="Enable black border removal")
    parser.add_argument("-q", "--quality", type=int, help="JPEG quality, 1-100")
    parser.add_argument("--parallel", action="store_true", help="Process cells in worker processes")
    parser.add_argument("--no-parallel", action="store_true", help="Process cells sequentially")
    parser.add_argument("--workers", type=int, help="Number of worker processes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--quiet", action="store_true", help="Only show warnings and errors")

    args = parser.parse_args(argv)

    try:
        config = _build_config(args)
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.log_file,
        use_rich=config.logging.use_rich,
        format_style=config.logging.format_style,
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print_error(f"Input not found: {input_path}")
        sys.exit(1)

    pipeline = NineGridPipeline(config)
    output_dir = Path(config.output.output_dir)

    if input_path.is_dir():
        results = pipeline.process_directory(input_path, output_dir)
        print_header("Batch complete")
        print_bullet(f"Composites processed: {len(results['successful'])}/{results['total']}")
        print_info(f"Output location: {output_dir}")
        for failure in results['failed']:
            print_warning(f"{failure['image']}: {failure['error']}")
        if results['failed']:
            sys.exit(1)
        return

    print_info(f"Slicing {input_path.name}")
    try:
        run = pipeline.process_file(input_path)
        paths = pipeline.export(output_dir)
    except NineGridError as e:
        print_error(str(e))
        sys.exit(1)

    print_success(f"Saved {len(paths)} slices to {output_dir}")
    print_separator(width=40)
    for item in run.slices:
        print_bullet(f"{item.filename}: {item.width}x{item.height}")
    if run.skipped:
        print_warning(f"Skipped slices: {', '.join(str(i + 1) for i in run.skipped)}")


if __name__ == "__main__":
    main()
