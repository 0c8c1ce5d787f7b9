"""
Process-wide log redirection into the interactive terminal.

While a session runs, stderr output would tear through the prompt line, so
the loguru handlers are swapped for a single handler that forwards every
record to a sink (the wallet CLI). The pipe is installed once at startup and
removed at teardown; unpipe() restores the stderr handler.

Usage:
    from kwallet import log_pipe

    log_pipe.pipe(cli, level="INFO")
    ...
    log_pipe.unpipe()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from loguru import logger

from kwallet.cli_common import setup_logging
from kwallet.errors import LogPipeError

if TYPE_CHECKING:
    from loguru import Message

PIPE_FORMAT = "{level: <8} | {name} - {message}"


class LogSink(Protocol):
    def write(self, target: str | None, level: str, message: str) -> bool: ...


class _SinkAdapter:
    """Loguru sink callable forwarding formatted records to a LogSink."""

    def __init__(self, sink: LogSink):
        self.sink = sink

    def __call__(self, message: Message) -> None:
        record = message.record
        self.sink.write(record["name"], record["level"].name, str(message).rstrip("\n"))


_handler_id: int | None = None
_level: str = "INFO"


def pipe(sink: LogSink, level: str = "INFO") -> None:
    """
    Route all log output to ``sink``.

    Raises:
        LogPipeError: If a pipe is already installed
    """
    global _handler_id, _level
    if _handler_id is not None:
        raise LogPipeError("log output is already piped to a terminal")

    logger.remove()
    _level = level.upper()
    _handler_id = logger.add(
        _SinkAdapter(sink),
        format=PIPE_FORMAT,
        level=_level,
        colorize=False,
    )
    logger.debug("Log output piped to terminal")


def unpipe() -> None:
    """Remove the terminal pipe and restore stderr logging."""
    global _handler_id
    if _handler_id is None:
        return

    logger.remove(_handler_id)
    _handler_id = None
    setup_logging(_level)


def is_piped() -> bool:
    return _handler_id is not None
