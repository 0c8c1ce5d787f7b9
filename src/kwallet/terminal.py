"""
Interactive terminal driving the wallet CLI.

The terminal reads one line at a time, hands it to a Cli implementation and
renders any error as a single line before reading the next one. Two targets
are supported:
- tty: prompt_toolkit line editing with history and tab completion
- stdio: plain line reads from stdin (scripts, pipes, CI)

Output written while the prompt is active is printed above it by
prompt_toolkit, so background writers (notification bridge, log pipe) never
corrupt the line being edited.
"""

from __future__ import annotations

import asyncio
import shlex
import sys
import threading
from collections.abc import AsyncGenerator, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger
from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory, InMemoryHistory

from kwallet.errors import TerminalClosedError
from kwallet.models import TerminalTarget


def parse(line: str) -> list[str]:
    """
    Split an input line into tokens.

    Quoted arguments are kept together. Unbalanced quotes fall back to a
    plain whitespace split.
    """
    try:
        return shlex.split(line)
    except ValueError:
        return line.split()


def read_stdin_line() -> asyncio.Future[str]:
    """
    Read one line from stdin on a daemon thread.

    A pending read does not hold up interpreter shutdown: cancelling the
    returned future leaves the thread blocked on stdin until the process
    exits, without joining it.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def resolve(line: str | None, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(line or "")

    def reader() -> None:
        line: str | None = None
        error: Exception | None = None
        try:
            line = sys.stdin.readline()
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(resolve, line, error)
        except RuntimeError:
            # Event loop already closed
            pass

    threading.Thread(target=reader, name="stdin-reader", daemon=True).start()
    return future


class Cli(Protocol):
    def init(self, term: Terminal) -> None: ...

    async def digest(self, term: Terminal, cmd: str) -> None: ...

    async def complete(self, term: Terminal, cmd: str) -> list[str]: ...


@dataclass
class TerminalOptions:
    """Display options for an interactive session."""

    prompt: str = "$ "
    history_file: Path | None = None
    target: TerminalTarget = TerminalTarget.TTY


class CrlfPipe:
    """Raw output channel for pre-formatted, CRLF-terminated text."""

    def __init__(self, term: Terminal):
        self._term = term

    async def send(self, text: str) -> None:
        if self._term.closed:
            raise TerminalClosedError("terminal is closed")
        self._term.write(text.replace("\r\n", "\n"))


class _CliCompleter(Completer):
    def __init__(self, term: Terminal):
        self.term = term

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        return []

    async def get_completions_async(
        self, document: Document, complete_event: CompleteEvent
    ) -> AsyncGenerator[Completion, None]:
        text = document.text_before_cursor
        word = document.get_word_before_cursor(WORD=True)
        for candidate in await self.term.cli.complete(self.term, text):
            yield Completion(candidate, start_position=-len(word))


class Terminal:
    """
    Line-oriented terminal bound to a Cli.

    Lifecycle: init() binds the Cli, run() blocks until exit() or reload()
    is requested (or input ends), after which the terminal is closed.
    """

    can_exit = True

    def __init__(self, cli: Cli, options: TerminalOptions | None = None):
        self.cli = cli
        self.options = options or TerminalOptions()
        self.pipe_crlf = CrlfPipe(self)
        self.reload_requested = False
        self._running = False
        self._closed = False
        self._session: PromptSession[str] | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._running

    async def init(self) -> None:
        if self.options.target == TerminalTarget.TTY:
            self._session = PromptSession(
                history=self._make_history(),
                completer=_CliCompleter(self),
                complete_while_typing=False,
            )
        self.cli.init(self)

    def _make_history(self) -> FileHistory | InMemoryHistory:
        history_file = self.options.history_file
        if history_file is None:
            return InMemoryHistory()
        history_file.parent.mkdir(parents=True, exist_ok=True)
        return FileHistory(str(history_file))

    def write(self, text: str) -> None:
        if self.options.target == TerminalTarget.TTY:
            print_formatted_text(text, end="")
        else:
            sys.stdout.write(text)
            sys.stdout.flush()

    def writeln(self, text: str = "") -> None:
        self.write(f"{text}\n")

    async def run(self) -> None:
        """Read and digest lines until the session ends."""
        self._running = True
        try:
            while self._running:
                try:
                    line = await self._read_line()
                except (EOFError, KeyboardInterrupt):
                    break
                if not line.strip():
                    continue
                try:
                    await self.cli.digest(self, line)
                except Exception as e:
                    logger.debug(f"Command {line!r} failed: {e}")
                    self.writeln(str(e))
        finally:
            self._running = False
            self._closed = True

    async def _read_line(self) -> str:
        if self._session is not None:
            return await self._session.prompt_async(self.options.prompt)

        self.write(self.options.prompt)
        line = await read_stdin_line()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    async def exit(self) -> None:
        """Stop the run loop after the current command completes."""
        self._running = False

    async def reload(self) -> None:
        """End this session and ask the caller to start a fresh one."""
        self.reload_requested = True
        self._running = False
