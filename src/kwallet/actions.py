"""
Command vocabulary for the interactive wallet.

Every input line starts with one of the tokens below. Remaining tokens are
kept with the parsed line but are not interpreted here.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from kwallet.errors import UnrecognizedCommandError

if TYPE_CHECKING:
    from kwallet.terminal import Terminal


class Action(str, Enum):
    HELP = "help"
    EXIT = "exit"
    GET_INFO = "get-info"
    PING = "ping"
    BALANCE = "query-balance"
    CREATE = "create-wallet"
    BROADCAST = "broadcast"
    CREATE_UNSIGNED_TX = "create-unsigned-tx"
    DUMP_UNENCRYPTED = "dump-unencrypted"
    NEW_ADDRESS = "new-address"
    PARSE = "parse"
    SEND = "send"
    SHOW_ADDRESS = "show-address"
    SIGN = "sign"
    SWEEP = "sweep"
    SUBSCRIBE_DAA_SCORE = "subscribe-daa-score"
    UNSUBSCRIBE_DAA_SCORE = "unsubscribe-daa-score"
    RELOAD = "reload"

    @classmethod
    def from_token(cls, token: str) -> Action:
        """
        Resolve the first token of an input line.

        Tokens are lowercased before lookup.

        Raises:
            UnrecognizedCommandError: If the token names no command
        """
        try:
            return cls(token.lower())
        except ValueError:
            raise UnrecognizedCommandError(token) from None


HELP: dict[Action, str] = {
    Action.HELP: "Display this help",
    Action.EXIT: "Exit the wallet",
    Action.GET_INFO: "Display node information",
    Action.PING: "Ping the node",
    Action.BALANCE: "Query wallet balance",
    Action.CREATE: "Create a new wallet",
    Action.BROADCAST: "Broadcast a signed transaction",
    Action.CREATE_UNSIGNED_TX: "Create an unsigned transaction",
    Action.DUMP_UNENCRYPTED: "Dump wallet data without encryption",
    Action.NEW_ADDRESS: "Generate a new receive address",
    Action.PARSE: "Parse a serialized transaction",
    Action.SEND: "Send funds to an address",
    Action.SHOW_ADDRESS: "Show the current receive address",
    Action.SIGN: "Sign an unsigned transaction",
    Action.SWEEP: "Sweep all funds to an address",
    Action.SUBSCRIBE_DAA_SCORE: "Subscribe to DAA score change notifications",
    Action.UNSUBSCRIBE_DAA_SCORE: "Unsubscribe from DAA score change notifications",
    Action.RELOAD: "Restart the session",
}


def command_names() -> list[str]:
    """Return every command token in vocabulary order."""
    return [action.value for action in Action]


def format_help() -> list[str]:
    """Return the help table as aligned lines."""
    width = max(len(action.value) for action in HELP)
    return [f"  {action.value:<{width}}  {description}" for action, description in HELP.items()]


def display_help(term: Terminal) -> None:
    for line in format_help():
        term.writeln(line)
    term.writeln("")
