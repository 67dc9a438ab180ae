"""Unicode-safe console output helpers for the command line interface."""

import sys


class ConsoleSymbols:
    """Unicode symbols with ASCII fallbacks."""

    SUCCESS = "✓"
    SUCCESS_FALLBACK = "OK"

    ERROR = "✗"
    ERROR_FALLBACK = "ERROR"

    WARNING = "⚠"
    WARNING_FALLBACK = "WARNING"

    INFO = "ℹ"
    INFO_FALLBACK = "INFO"

    BULLET = "•"
    BULLET_FALLBACK = "*"


_FALLBACKS = {
    ConsoleSymbols.SUCCESS: ConsoleSymbols.SUCCESS_FALLBACK,
    ConsoleSymbols.ERROR: ConsoleSymbols.ERROR_FALLBACK,
    ConsoleSymbols.WARNING: ConsoleSymbols.WARNING_FALLBACK,
    ConsoleSymbols.INFO: ConsoleSymbols.INFO_FALLBACK,
    ConsoleSymbols.BULLET: ConsoleSymbols.BULLET_FALLBACK,
}


def can_display_unicode() -> bool:
    """Check if the current console can display Unicode characters."""
    try:
        "✓".encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


def get_symbol(unicode_symbol: str, fallback: str) -> str:
    """Get Unicode symbol if supported, otherwise return ASCII fallback."""
    if can_display_unicode():
        return unicode_symbol
    return fallback


def safe_print(*args, **kwargs) -> None:
    """Print with Unicode fallback support."""
    try:
        print(*args, **kwargs)
    except UnicodeEncodeError:
        safe_args = []
        for arg in args:
            text = str(arg)
            for symbol, fallback in _FALLBACKS.items():
                text = text.replace(symbol, fallback)
            safe_args.append(text)
        print(*safe_args, **kwargs)


def print_success(message: str, **kwargs) -> None:
    """Print success message with appropriate symbol."""
    symbol = get_symbol(ConsoleSymbols.SUCCESS, ConsoleSymbols.SUCCESS_FALLBACK)
    safe_print(f"{symbol} {message}", **kwargs)


def print_error(message: str, **kwargs) -> None:
    """Print error message with appropriate symbol."""
    symbol = get_symbol(ConsoleSymbols.ERROR, ConsoleSymbols.ERROR_FALLBACK)
    safe_print(f"{symbol} {message}", **kwargs)


def print_warning(message: str, **kwargs) -> None:
    """Print warning message with appropriate symbol."""
    symbol = get_symbol(ConsoleSymbols.WARNING, ConsoleSymbols.WARNING_FALLBACK)
    safe_print(f"{symbol} {message}", **kwargs)


def print_info(message: str, **kwargs) -> None:
    """Print info message with appropriate symbol."""
    symbol = get_symbol(ConsoleSymbols.INFO, ConsoleSymbols.INFO_FALLBACK)
    safe_print(f"{symbol} {message}", **kwargs)


def print_bullet(message: str, indent: int = 2, **kwargs) -> None:
    """Print an indented list item."""
    symbol = get_symbol(ConsoleSymbols.BULLET, ConsoleSymbols.BULLET_FALLBACK)
    safe_print(f"{' ' * indent}{symbol} {message}", **kwargs)


def print_header(title: str, width: int = 60, char: str = "=") -> None:
    """Print a formatted header."""
    safe_print(title.upper())
    safe_print(char * width)


def print_separator(width: int = 60, char: str = "-") -> None:
    """Print a separator line."""
    safe_print(char * width)
