"""
Entry point for the ``kaspa-wallet`` console script.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from kwallet.cli_common import setup_cli, setup_logging
from kwallet.lifecycle import run_wallet_cli
from kwallet.models import NetworkType, TerminalTarget
from kwallet.settings import WalletCliSettings, ensure_config_file
from kwallet.terminal import TerminalOptions

app = typer.Typer(
    name="kaspa-wallet",
    help="Kaspa Wallet interactive CLI",
    add_completion=False,
)


def build_terminal_options(
    settings: WalletCliSettings,
    *,
    prompt: str | None = None,
    history_file: Path | None = None,
    history: bool | None = None,
    target: TerminalTarget | None = None,
) -> TerminalOptions:
    """
    Resolve terminal options with priority: CLI > Settings (env + config) > Defaults.
    """
    resolved_history = history if history is not None else settings.terminal.history
    if not resolved_history:
        resolved_history_file = None
    elif history_file is not None:
        resolved_history_file = history_file
    else:
        resolved_history_file = settings.get_history_file()

    return TerminalOptions(
        prompt=prompt if prompt is not None else settings.terminal.prompt,
        history_file=resolved_history_file,
        target=target if target is not None else settings.terminal.target,
    )


async def _run_sessions(
    options: TerminalOptions, settings: WalletCliSettings, pipe_logs: bool
) -> None:
    while await run_wallet_cli(options, settings, pipe_logs=pipe_logs):
        logger.info("Reloading wallet session...")


@app.command()
def run(
    prompt: Annotated[str | None, typer.Option("--prompt", help="Input prompt")] = None,
    history_file: Annotated[
        Path | None, typer.Option("--history-file", help="Command history file")
    ] = None,
    no_history: Annotated[
        bool, typer.Option("--no-history", help="Do not persist command history")
    ] = False,
    target: Annotated[
        TerminalTarget | None,
        typer.Option("--target", help="Rendering target: tty or stdio"),
    ] = None,
    rpc_url: Annotated[
        str | None, typer.Option("--rpc-url", help="Kaspa node wRPC websocket URL")
    ] = None,
    network: Annotated[
        NetworkType | None, typer.Option("--network", "-n", help="Kaspa network")
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", "-l", help="Log level")
    ] = None,
    no_log_pipe: Annotated[
        bool, typer.Option("--no-log-pipe", help="Keep log output on stderr")
    ] = False,
) -> None:
    """Start an interactive wallet session."""
    settings = setup_cli(log_level)
    if log_level is not None:
        settings.logging.level = log_level.upper()
    if rpc_url is not None:
        settings.rpc.url = rpc_url
    if network is not None:
        settings.rpc.network = network

    options = build_terminal_options(
        settings,
        prompt=prompt,
        history_file=history_file,
        history=False if no_history else None,
        target=target,
    )
    resolved_pipe_logs = settings.logging.pipe_to_terminal and not no_log_pipe

    try:
        asyncio.run(_run_sessions(options, settings, resolved_pipe_logs))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        raise typer.Exit(1) from e


@app.command("config-init")
def config_init(
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Data directory for config.toml")
    ] = None,
) -> None:
    """Write a commented config template if none exists."""
    setup_logging()
    config_path = ensure_config_file(data_dir)
    typer.echo(f"Config file: {config_path}")


def main() -> None:
    """Entry point for the ``kaspa-wallet`` console script."""
    app()


if __name__ == "__main__":
    main()
