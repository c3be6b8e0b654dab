"""Logging setup and a Rich console that mirrors its output into the debug log.

In debug mode every module logger writes to the debug log file, and everything
the wizard prints to the terminal is copied there as plain text, so a single
file tells the whole story of a failed deployment.
"""

import io
import logging
import os
import re
from typing import Optional
from rich.console import Console as RichConsole

_ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """
    Rich Console that also logs a plain text copy of everything it prints.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """
        Render the objects to plain text without Rich markup.

        Args:
            *objects: Objects to render
            **kwargs: Keyword arguments from print call

        Returns:
            Plain text string without Rich formatting
        """
        string_buffer = io.StringIO()
        temp_console = RichConsole(
            file=string_buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return _ANSI_ESCAPE.sub('', string_buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create appropriate console instance based on debug mode.

    Args:
        debug_enabled: Whether debug mode is enabled
        debug_logger: Logger instance for debug output

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    else:
        return RichConsole()


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Set up a dedicated logger for captured console output.

    Args:
        log_file: Path to debug log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("debug_console")
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    logger.addHandler(file_handler)

    # Console copies go to the file only, never back to stderr
    logger.propagate = False

    return logger


def configure_logging(debug: bool = False,
                      log_level: str = "warning",
                      log_file: str = "wizard_debug.log") -> RichConsole:
    """
    Configure root logging and return the console the wizard should print to.

    Without debug, module loggers go to stderr at ``log_level``. With debug,
    everything down to DEBUG is appended to ``log_file`` and the returned
    console mirrors its output into the same file.

    Args:
        debug: Whether debug mode is enabled
        log_level: Level name used when debug is off
        log_file: Debug log path

    Returns:
        Console instance for operator-facing output
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if not debug:
        root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.WARNING))
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)
        return create_debug_console(debug_enabled=False)

    log_path = os.path.abspath(log_file)
    root_logger.setLevel(logging.DEBUG)
    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # httpx logs every request URL at INFO; keep that but drop its wire-level chatter
    logging.getLogger("httpcore").setLevel(logging.INFO)

    console_logger = setup_debug_logger(log_path)
    console_logger.debug("[CLI] ===== WIZARD SESSION STARTED =====")
    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_path}")
    return create_debug_console(debug_enabled=True, debug_logger=console_logger)
