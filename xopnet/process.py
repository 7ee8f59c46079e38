"""Starting, watching and stopping one child process."""

from __future__ import annotations

import shlex
import subprocess
from typing import BinaryIO, Optional

__all__ = ["Process"]


class Process:
    """A single child process, optionally with its output sent to a log file."""

    def __init__(self) -> None:
        self._proc: Optional[subprocess.Popen] = None
        self._log: Optional[BinaryIO] = None

    @property
    def pid(self) -> int:
        """Process id of the child, or 0 if none was started."""
        return self._proc.pid if self._proc is not None else 0

    def start(self, app_path: str, cmd: str, log_path: str = "") -> bool:
        """Run ``app_path`` with the arguments in ``cmd``.

        Standard output and error go to ``log_path`` when it is given and can
        be opened. Returns False if a child is already running or it cannot
        be started.
        """
        if self._proc is not None:
            return False

        log: Optional[BinaryIO] = None
        if log_path:
            try:
                log = open(log_path, "ab")
            except OSError:
                log = None

        try:
            self._proc = subprocess.Popen(
                [app_path, *shlex.split(cmd)],
                stdout=log,
                stderr=log,
            )
        except (OSError, ValueError):
            if log is not None:
                log.close()
            return False
        self._log = log
        return True

    def stop(self) -> None:
        """Terminate the child and close its log file."""
        if self._proc is None:
            return
        if self._proc.poll() is None:
            self._proc.terminate()
            try:
                self._proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._proc.kill()
                self._proc.wait()
        self._proc = None
        if self._log is not None:
            self._log.close()
            self._log = None

    def is_alive(self) -> bool:
        return self._proc is not None and self._proc.poll() is None