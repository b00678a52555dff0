"""Logging setup and a Rich console that mirrors its output to the debug log"""

import io
import logging
import os
import re
from typing import Optional
from rich.console import Console as RichConsole

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """
    Rich Console that also writes a plain-text copy of everything it
    prints to the debug logger.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        """
        Initialize the capturing console.

        Args:
            debug_logger: Logger that receives the plain-text copies
            *args, **kwargs: Passed through to the Rich Console
        """
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        """
        Print to the terminal, then log a plain-text copy of the output.

        Blank renders are not logged.
        """
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """
        Render the objects without markup or ANSI escapes.

        Args:
            *objects: Objects passed to print
            **kwargs: Keyword arguments passed to print

        Returns:
            The rendered text with trailing whitespace removed
        """
        string_buffer = io.StringIO()
        temp_console = RichConsole(
            file=string_buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', string_buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create appropriate console instance based on debug mode.

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Set up a dedicated logger for debug console output.

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

    # Keep console captures out of the root handlers
    logger.propagate = False

    return logger


def configure_logging(level: str = "info", debug: bool = False,
                      log_file: str = "nocaptcha_debug.log") -> Optional[logging.Logger]:
    """
    Configure the root logger.

    In debug mode every record is appended to ``log_file`` and a debug
    console logger is returned for use with create_debug_console.

    Args:
        level: Log level name used outside debug mode
        debug: Whether debug mode is enabled
        log_file: Path to debug log file

    Returns:
        The debug console logger in debug mode, otherwise None
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if not debug:
        root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
        return None

    root_logger.setLevel(logging.DEBUG)
    log_file = os.path.abspath(log_file)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    debug_logger = setup_debug_logger(log_file)
    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
    return debug_logger
