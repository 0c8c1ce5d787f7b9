"""
Shared test helpers for kwallet tests.

Test doubles used across test files. Separated from conftest.py so test
modules can import them directly.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from kwallet.errors import TerminalClosedError

# Wallet coroutine methods reachable from a typed command
WALLET_COMMAND_METHODS = [
    "get_info",
    "ping",
    "balance",
    "create",
    "broadcast",
    "create_unsigned_transaction",
    "dump_unencrypted",
    "new_address",
    "parse",
    "send",
    "show_address",
    "sign",
    "sweep",
    "subscribe_daa_score",
    "unsubscribe_daa_score",
]

TEST_ADDRESS = "kaspa:qpzry9x8gf2tvdw0s3jn54khce6mua7l"


class RecordingPipe:
    """Stand-in for Terminal.pipe_crlf."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.fail = False

    async def send(self, text: str) -> None:
        if self.fail:
            raise TerminalClosedError("terminal is closed")
        self.sent.append(text)


class FakeTerminal:
    """Records everything the CLI writes."""

    def __init__(self, can_exit: bool = True) -> None:
        self.can_exit = can_exit
        self.lines: list[str] = []
        self.pipe_crlf = RecordingPipe()
        self.exited = False
        self.reload_requested = False

    def writeln(self, text: str = "") -> None:
        self.lines.append(text)

    async def exit(self) -> None:
        self.exited = True

    async def reload(self) -> None:
        self.reload_requested = True


def backend_call_count(wallet: MagicMock) -> int:
    """Total number of awaited wallet command calls."""
    return sum(getattr(wallet, name).await_count for name in WALLET_COMMAND_METHODS)
