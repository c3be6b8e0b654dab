"""Shared utilities package for the BPB deployment wizard"""

from .debug_console import (
    DebugCapturingConsole,
    configure_logging,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "DebugCapturingConsole",
    "configure_logging",
    "create_debug_console",
    "setup_debug_logger",
]
