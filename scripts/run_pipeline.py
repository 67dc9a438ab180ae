#!/usr/bin/env python3
"""Entry point for running the nine-grid slicer from a source checkout.

Usage:
    python scripts/run_pipeline.py collage.jpg                  # Slice into output/nine_grid_slices
    python scripts/run_pipeline.py collage.jpg -o slices -s 30  # Custom output and sensitivity
    python scripts/run_pipeline.py composites/ --parallel       # Batch a directory
    python scripts/run_pipeline.py --help                       # Show all options
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from nine_grid.pipeline import main

if __name__ == "__main__":
    main()
