"""
Lazily bound handle to the interactive terminal.

The handle is created empty together with the wallet CLI and bound once,
when the terminal initializes. Command results, the notification bridge and
the log redirection hook all write through it, possibly from different
threads (loguru may invoke sinks from any thread), so access is guarded by a
lock.
"""

from __future__ import annotations

import threading
from typing import Protocol

from kwallet.errors import SessionAlreadyBoundError


class LineWriter(Protocol):
    def writeln(self, text: str) -> None: ...


class SessionHandle:
    """Single-write slot holding the bound terminal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._term: LineWriter | None = None

    def bind(self, term: LineWriter) -> None:
        """
        Bind the terminal.

        Raises:
            SessionAlreadyBoundError: If a terminal is already bound
        """
        with self._lock:
            if self._term is not None:
                raise SessionAlreadyBoundError("terminal session is already bound")
            self._term = term

    def get(self) -> LineWriter | None:
        with self._lock:
            return self._term

    @property
    def is_bound(self) -> bool:
        return self.get() is not None

    def write(self, line: str) -> bool:
        """
        Write a line to the bound terminal.

        Returns:
            False if nothing is bound yet (the line is dropped), True otherwise
        """
        term = self.get()
        if term is None:
            return False
        term.writeln(line)
        return True
