"""
Command dispatch for the interactive wallet.

WalletCli is the Cli bound to the terminal: it resolves each input line to
an Action and runs the matching wallet call, owns the notification bridge
that streams node notifications to the terminal, and acts as the log sink
while log output is piped to the terminal.
"""

from __future__ import annotations

from loguru import logger

from kwallet.actions import Action, command_names, display_help
from kwallet.bridge import NotificationBridge
from kwallet.errors import BridgeNotRunningError, LifecycleError
from kwallet.session import SessionHandle
from kwallet.terminal import Terminal, parse
from kwallet.wallet import Wallet


class WalletCli:
    def __init__(self, wallet: Wallet):
        self.wallet = wallet
        self.session = SessionHandle()
        self._bridge: NotificationBridge | None = None

    def term(self) -> Terminal | None:
        return self.session.get()  # type: ignore[return-value]

    def write(self, target: str | None, level: str, message: str) -> bool:
        """Log sink: forward a log line to the bound terminal."""
        return self.session.write(message)

    def init(self, term: Terminal) -> None:
        self.session.bind(term)

    async def digest(self, term: Terminal, cmd: str) -> None:
        argv = parse(cmd)
        if not argv:
            return
        action = Action.from_token(argv[0])
        await self.action(action, argv, term)

    async def complete(self, term: Terminal, cmd: str) -> list[str]:
        argv = parse(cmd)
        if cmd.endswith(" ") and argv:
            return []
        if len(argv) > 1:
            return []
        prefix = argv[0].lower() if argv else ""
        return [name for name in command_names() if name.startswith(prefix)]

    async def action(self, action: Action, argv: list[str], term: Terminal) -> None:
        # Remaining argv tokens are not forwarded to wallet calls
        if action == Action.HELP:
            term.writeln("")
            term.writeln("Commands:")
            term.writeln("")
            display_help(term)
        elif action == Action.EXIT:
            term.writeln("bye!")
            if term.can_exit:
                await term.exit()
            else:
                await term.reload()
        elif action == Action.GET_INFO:
            response = await self.wallet.get_info()
            term.writeln(response)
        elif action == Action.PING:
            await self.wallet.ping()
            term.writeln("ok")
        elif action == Action.BALANCE:
            await self.wallet.balance()
        elif action == Action.CREATE:
            await self.wallet.create()
        elif action == Action.BROADCAST:
            await self.wallet.broadcast()
        elif action == Action.CREATE_UNSIGNED_TX:
            await self.wallet.create_unsigned_transaction()
        elif action == Action.DUMP_UNENCRYPTED:
            await self.wallet.dump_unencrypted()
        elif action == Action.NEW_ADDRESS:
            response = await self.wallet.new_address()
            term.writeln(response)
        elif action == Action.PARSE:
            await self.wallet.parse()
        elif action == Action.SEND:
            await self.wallet.send()
        elif action == Action.SHOW_ADDRESS:
            await self.wallet.show_address()
        elif action == Action.SIGN:
            await self.wallet.sign()
        elif action == Action.SWEEP:
            await self.wallet.sweep()
        elif action == Action.SUBSCRIBE_DAA_SCORE:
            await self.wallet.subscribe_daa_score()
        elif action == Action.UNSUBSCRIBE_DAA_SCORE:
            await self.wallet.unsubscribe_daa_score()
        elif action == Action.RELOAD:
            await term.reload()

    async def start(self) -> None:
        """
        Start piping wallet notifications to the terminal.

        Raises:
            LifecycleError: If no terminal is bound yet
        """
        term = self.term()
        if term is None:
            raise LifecycleError("WalletCli.start(): terminal is not initialized")

        self._bridge = NotificationBridge(
            self.wallet.notification_channel_receiver(),
            term.pipe_crlf,
        )
        self._bridge.start()

    async def stop(self) -> None:
        """Stop the notification bridge and wait until it has acknowledged."""
        if self._bridge is None:
            raise BridgeNotRunningError("WalletCli.stop(): notification bridge was never started")
        await self._bridge.stop()
        logger.debug("Notification pipe stopped")
