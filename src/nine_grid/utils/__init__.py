"""Nine-grid utility modules."""

from .console import (
    print_success, print_error, print_warning, print_info, print_bullet,
    print_header, print_separator, safe_print,
    get_symbol, ConsoleSymbols,
)
from .logging_utils import setup_logging, log_processing_stats

__all__ = [
    'print_success', 'print_error', 'print_warning', 'print_info', 'print_bullet',
    'print_header', 'print_separator', 'safe_print',
    'get_symbol', 'ConsoleSymbols',
    'setup_logging', 'log_processing_stats',
]
