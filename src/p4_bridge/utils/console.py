"""Console output helpers for the command-line interface."""

import sys
from typing import Any

from rich.console import Console

# ASCII fallbacks for legacy Windows code pages
USE_ASCII_FALLBACKS = sys.stdout.encoding and sys.stdout.encoding.lower() in ('cp1252', 'cp850', 'ascii')

SYMBOLS = {
    'info': 'i' if USE_ASCII_FALLBACKS else 'ℹ',
    'warning': '!' if USE_ASCII_FALLBACKS else '⚠',
    'error': 'X' if USE_ASCII_FALLBACKS else '✗',
    'success': 'v' if USE_ASCII_FALLBACKS else '✓',
}

# stdout stays free for command output (e.g. `p4-bridge creds --json`)
console = Console(stderr=True, legacy_windows=False)
error_console = Console(stderr=True, legacy_windows=False)


def log_info(message: str, **kwargs: Any) -> None:
    """Print an info message.

    Args:
        message: Message to print
        **kwargs: Additional arguments passed to rich console
    """
    console.print(f"[blue]{SYMBOLS['info']}[/blue] {message}", **kwargs)


def log_warning(message: str, **kwargs: Any) -> None:
    console.print(f"[yellow]{SYMBOLS['warning']}[/yellow] {message}", **kwargs)


def log_error(message: str, **kwargs: Any) -> None:
    error_console.print(f"[red]{SYMBOLS['error']}[/red] {message}", **kwargs)


def log_success(message: str, **kwargs: Any) -> None:
    console.print(f"[green]{SYMBOLS['success']}[/green] {message}", **kwargs)
