"""A process-wide logger that writes to stdout and optionally a file."""

from __future__ import annotations

import enum
import inspect
import os
import sys
import threading
from typing import BinaryIO, Optional

from .timestamp import localtime

__all__ = ["Priority", "Logger", "log_info", "log_error", "log_debug"]


class Priority(enum.IntEnum):
    """Severity of a log line."""

    DEBUG = 0
    STATE = 1
    INFO = 2
    WARNING = 3
    ERROR = 4

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Priority.DEBUG: "DEBUG",
    Priority.STATE: "CONFIG",
    Priority.INFO: "INFO",
    Priority.WARNING: "WARNING",
    Priority.ERROR: "ERROR",
}


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


class Logger:
    """Writes time-stamped lines to stdout and, once initialised, to a file."""

    _instance: Optional["Logger"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._file: Optional[BinaryIO] = None
        self.debug = False

    @classmethod
    def instance(cls) -> "Logger":
        """The shared logger."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def init(self, pathname: Optional[str] = None) -> None:
        """Start copying log lines to the file at ``pathname``."""
        with self._lock:
            if pathname is None:
                return
            try:
                self._file = open(pathname, "wb")
            except OSError:
                self._file = None
                print("Failed to open logfile.", file=sys.stderr)

    def exit(self) -> None:
        """Stop writing to the log file."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def log(self, priority: Priority, file: str, func: str, line: int, fmt: str, *args) -> None:
        """Log with the source location in the prefix."""
        with self._lock:
            prefix = f"[{Priority(priority).label}][{file}:{func}:{line}] "
            self._write(prefix + _format(fmt, args))

    def log2(self, priority: Priority, fmt: str, *args) -> None:
        """Log with the priority only in the prefix."""
        with self._lock:
            prefix = f"[{Priority(priority).label}] "
            self._write(prefix + _format(fmt, args))

    def _write(self, info: str) -> None:
        line = f"[{localtime()}]{info}"
        if self._file is not None:
            self._file.write((line + "\n").encode("utf-8"))
            self._file.flush()
        print(line, flush=True)


def _caller():
    frame = inspect.currentframe()
    caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
    if caller is None:
        return "?", "?", 0
    code = caller.f_code
    return os.path.basename(code.co_filename), code.co_name, caller.f_lineno


def log_info(fmt: str, *args) -> None:
    """Log an informational message."""
    Logger.instance().log2(Priority.INFO, fmt, *args)


def log_error(fmt: str, *args) -> None:
    """Log an error with the caller's location."""
    file, func, line = _caller()
    Logger.instance().log(Priority.ERROR, file, func, line, fmt, *args)


def log_debug(fmt: str, *args) -> None:
    """Log a debug message with the caller's location, if debugging is on."""
    logger = Logger.instance()
    if not logger.debug:
        return
    file, func, line = _caller()
    logger.log(Priority.DEBUG, file, func, line, fmt, *args)