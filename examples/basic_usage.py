"""Basic usage example for the nine-grid slicer."""

from pathlib import Path

from nine_grid import NineGridPipeline
from nine_grid.config import build_options, get_default_config
from nine_grid.exceptions import NineGridError


def main():
    """Example of basic pipeline usage."""

    config = get_default_config()
    config.output.output_dir = "output/example_slices"
    pipeline = NineGridPipeline(config)

    print("Nine-Grid Slicer - Example")
    print("=" * 40)

    source = Path("input/collage.jpg")
    if not source.exists():
        print(f"Please place a 3x3 composite at {source} and run again.")
        return

    # Trim dark borders a bit more aggressively than the default
    options = build_options(remove_black_borders=True, sensitivity=35)

    try:
        run = pipeline.process_file(source, options)
        paths = pipeline.export()
    except NineGridError as e:
        print(f"Error: {e}")
        return

    print(f"\nSuccess! Created {len(paths)} slices:")
    for item, path in zip(run.slices, paths):
        print(f"  - {path} ({item.width}x{item.height})")
    if run.skipped:
        print(f"Skipped: {run.skipped}")


if __name__ == "__main__":
    main()
