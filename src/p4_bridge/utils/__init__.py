"""Utility modules for p4-bridge."""

from p4_bridge.utils.console import (
    log_error,
    log_info,
    log_success,
    log_warning,
)
from p4_bridge.utils.debug import DebugLogger

__all__ = [
    "DebugLogger",
    "log_info",
    "log_warning",
    "log_error",
    "log_success",
]
