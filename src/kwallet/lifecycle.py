"""
Startup and teardown of an interactive wallet session.

Startup order:
1. Create the wallet (RPC client not yet connected)
2. Create the WalletCli with an unbound session
3. Create and initialize the terminal, which binds the session
4. Pipe log output to the terminal (optional)
5. Start the notification bridge
6. Print the banner
7. Start the wallet (connects RPC, notifications begin)
8. Run the terminal input loop

Teardown runs in reverse: the wallet stops producing notifications first,
then the bridge is stopped and its acknowledgment awaited, then the log
pipe is removed. No background output happens after run_wallet_cli returns.
"""

from __future__ import annotations

from loguru import logger

from kwallet import log_pipe
from kwallet.settings import WalletCliSettings
from kwallet.terminal import Terminal, TerminalOptions
from kwallet.version import get_banner
from kwallet.wallet import Wallet
from kwallet.wallet_cli import WalletCli


async def run_wallet_cli(
    options: TerminalOptions,
    settings: WalletCliSettings,
    pipe_logs: bool = True,
) -> bool:
    """
    Run one interactive session until the operator exits.

    Args:
        options: Terminal display options
        settings: Resolved settings (RPC endpoint, log level)
        pipe_logs: Redirect log output into the terminal during the session

    Returns:
        True if the operator asked for the session to be reloaded
    """
    wallet = await Wallet.try_new(settings)
    cli = WalletCli(wallet)
    term = Terminal(cli, options)
    await term.init()

    if pipe_logs:
        log_pipe.pipe(cli, level=settings.logging.level)
    try:
        await cli.start()
        try:
            term.writeln(get_banner())
            await wallet.start()
            try:
                await term.run()
            finally:
                await wallet.stop()
        finally:
            await cli.stop()
    finally:
        if pipe_logs:
            log_pipe.unpipe()

    logger.debug(f"Session ended (reload requested: {term.reload_requested})")
    return term.reload_requested
