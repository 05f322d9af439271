"""
ethdo Logging System
====================

A unified, thread-safe logging utility for ethdo. This module integrates with
the standard Python `logging` library and the `rich` library to provide
readable console output on stderr and, when requested with ``--log``, a
rotating activity log on disk.

Standard output is reserved for command results, so nothing here writes to it.

Usage:
    >>> from ethdo.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Wallet created")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_MAX_FILE_SIZE,
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
)


class LogManager:
    """
    Manages logging configuration via the Singleton pattern.

    The command line reconfigures logging once per invocation, after flags
    are known. Anything that asks for a logger before that gets the default
    configuration (warnings and above on stderr).

    Attributes:
        _instance (LogManager): The singleton instance.
        _lock (threading.Lock): Thread lock for atomic initialization.
    """

    _instance: Optional["LogManager"] = None
    _lock: threading.Lock = threading.Lock()


    def __new__(cls) -> "LogManager":
        """Creates or returns the existing singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance


    def __init__(self) -> None:
        if self._initialized:
            return
        self._configured = False
        self._initialized = True


    @staticmethod
    def validate_log_format(log_format: str) -> str:
        """
        Validates the syntax of a logging format string.

        Args:
            log_format (str): The logging format string (e.g., "%(asctime)s - %(message)s").

        Returns:
            str: The validated format string, or the default `LOG_FORMAT` if validation fails.
        """
        try:
            if not log_format:
                return str(LOG_FORMAT.default())

            log_format = str(log_format)

            format_specifier_pattern = r"\([a-zA-Z_][a-zA-Z0-9_]*\)[a-zA-Z]"
            for match in re.finditer(format_specifier_pattern, log_format):
                start_pos = match.start()
                if start_pos == 0 or log_format[start_pos - 1] != "%":
                    raise ValueError("Malformed format specifier.")

            # Test formatting against a dummy record to catch runtime errors
            formatter = logging.Formatter(fmt=log_format)
            record = logging.LogRecord(
                name="test", level=logging.INFO, pathname="", lineno=0,
                msg="test", args=(), exc_info=None,
            )
            formatter.format(record)
            return log_format
        except (ValueError, KeyError, TypeError) as e:
            print(
                f"{time.strftime('%Y-%m-%d %H:%M:%S')} - ethdo.logger - Validation Error: {e}. Using default.",
                file=sys.stderr,
            )
            return str(LOG_FORMAT.default())


    def configure(
        self,
        log_level: int = logging.WARNING,
        log_file: Optional[Path] = None,
        console_output: bool = True,
    ) -> None:
        """
        Configures the root logger with console and file handlers.

        Args:
            log_level (int): Numeric logging level.
            log_file (Optional[Path]): Activity log file. No file logging when None.
            console_output (bool): Enable stderr logging. Defaults to True.
        """
        with self._lock:
            root_logger = logging.getLogger()
            root_logger.setLevel(log_level)

            # Request-level chatter from the HTTP client is never useful here
            for lib in ["httpx", "httpx._client", "httpcore"]:
                logging.getLogger(lib).setLevel(logging.WARNING)

            for handler in list(root_logger.handlers):
                root_logger.removeHandler(handler)
                handler.close()

            log_format = self.validate_log_format(LOG_FORMAT)
            date_format = str(LOG_DATE_FORMAT) or str(LOG_DATE_FORMAT.default())

            # Uses UTC for consistency across different machines
            formatter = TerminalSafeFormatter(fmt=log_format, datefmt=date_format + " UTC")
            formatter.converter = time.gmtime

            if console_output:
                if LOG_CONSOLE_HIGHLIGHTING:
                    ethdo_theme = Theme(
                        {
                            "ethdo.hex":            "cyan",
                            "ethdo.level_critical": "bold red reverse",
                            "ethdo.level_debug":    "bold dim",
                            "ethdo.level_error":    "bold red",
                            "ethdo.level_info":     "bold green",
                            "ethdo.level_warning":  "bold yellow",
                            "ethdo.logger_name":    "magenta",
                            "ethdo.timestamp":      "bold cyan",
                            "ethdo.url":            "cyan",
                        }
                    )
                    console = Console(theme=ethdo_theme, stderr=True, highlight=False)
                    rich_handler = RichHandler(
                        console=console,
                        highlighter=EthdoLogHighlighter(),
                        keywords=[],
                        rich_tracebacks=True,
                        show_path=False,
                        show_time=False,
                        show_level=False,
                        markup=False,
                    )
                    rich_handler.setLevel(log_level)
                    rich_handler.setFormatter(formatter)
                    root_logger.addHandler(rich_handler)
                else:
                    console_handler = logging.StreamHandler(sys.stderr)
                    console_handler.setLevel(log_level)
                    console_handler.setFormatter(formatter)
                    root_logger.addHandler(console_handler)

            if log_file is not None:
                log_file = Path(log_file).expanduser()
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    filename=str(log_file),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                )
                # The activity log records everything the user did, whatever the console shows
                file_handler.setLevel(min(log_level, logging.INFO))
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
                root_logger.setLevel(min(log_level, logging.INFO))

            self._configured = True


    def get_logger(self, name: str) -> logging.Logger:
        """
        Retrieves a logger, applying the default configuration on first use.

        Args:
            name (str): The name of the logger (typically `__name__`).

        Returns:
            logging.Logger: A standard Python logger.
        """
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


    @property
    def is_configured(self) -> bool:
        """Returns True if the logging system has been configured."""
        return self._configured


class TerminalSafeFormatter(logging.Formatter):
    """
    A formatter class that sanitizes log output.

    Strips ANSI escape sequences and non-printable control characters, since
    wallet and account names end up in log lines verbatim.
    """

    _ansi_escape_re = re.compile(
        r"\x1b\[[0-?]*[ -/]*[@-~]"
        r"|\x1b[@-Z\\-_]"
    )
    # Control chars (0x00-0x1F) excluding Tab and Newline
    _control_chars_re = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
    _carriage_return_re = re.compile(r"\r")


    @classmethod
    def sanitize(cls, text: str) -> str:
        """Removes potentially dangerous characters from the provided text."""
        if not text:
            return text
        text = cls._ansi_escape_re.sub("", text)
        text = cls._carriage_return_re.sub("", text)
        text = cls._control_chars_re.sub("", text)
        return text


    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class EthdoLogHighlighter(RegexHighlighter):
    """Rich highlighter for log levels, hex values and endpoints."""

    base_style = "ethdo."
    highlights = [
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"(?P<level_warning>\bWARNING\b)",
        r"\-\s+\w+\s+-\s+(?P<logger_name>[\w.]+)(?=\s-\s)",
        r"(?P<hex>\b0x[0-9a-fA-F]+\b)",
        r"(?P<timestamp>^(.*?)UTC)",
        r"(?P<url>https?://\S+)",
    ]


_manager = LogManager()


def configure_logging(
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Apply the command line's verbosity flags to the logging system.

    ``--debug`` selects DEBUG, ``--verbose`` INFO, otherwise WARNING.
    ``--quiet`` removes console output entirely.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    _manager.configure(log_level=level, log_file=log_file, console_output=not quiet)


def get_logger(name: str) -> logging.Logger:
    """
    Public accessor of the logging system.

    Args:
        name (str): The name of the module requesting the logger.

    Returns:
        logging.Logger: The logger instance.
    """
    return _manager.get_logger(name)
