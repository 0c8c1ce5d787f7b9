"""
Exception hierarchy for the Kaspa wallet CLI.

Errors fall into four groups:
- Resolution errors: the typed command is not part of the vocabulary
- Backend errors: a wallet or RPC call failed
- Bridge errors: misuse of the notification bridge start/stop handshake
- Lifecycle errors: startup could not complete

Command-level errors are reported on the terminal and the session continues.
Lifecycle errors abort the run.
"""

from __future__ import annotations


class WalletCliError(Exception):
    """Base class for all errors raised by kwallet."""


class UnrecognizedCommandError(WalletCliError):
    """The first token of an input line does not name a known command."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"unrecognized command: '{token}' (type 'help' for list of commands)")


class WalletError(WalletCliError):
    """A backend wallet operation failed."""


class UnsupportedOperationError(WalletError):
    """The wallet backend does not implement the requested operation."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"'{operation}' is not supported by this wallet backend")


class RpcError(WalletError):
    """The node rejected an RPC request or the connection failed."""


class BridgeError(WalletCliError):
    """Notification bridge start/stop misuse."""


class BridgeAlreadyRunningError(BridgeError):
    """The bridge was started twice without an intermediate stop."""


class BridgeNotRunningError(BridgeError):
    """A stop was requested with no matching start."""


class LifecycleError(WalletCliError):
    """A component was used before it was ready."""


class SessionAlreadyBoundError(LifecycleError):
    """The session handle was bound a second time."""


class LogPipeError(WalletCliError):
    """The log redirection hook was installed twice."""


class TerminalClosedError(WalletCliError):
    """Output was sent to a terminal that is no longer running."""
