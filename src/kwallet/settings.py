"""
Unified settings management for the Kaspa wallet CLI.

This module provides a centralized configuration system using pydantic-settings
that supports:
1. TOML configuration file (~/.kaspa-wallet-cli/config.toml)
2. Environment variables
3. CLI arguments (via typer, handled in kwallet.main)

Priority (highest to lowest):
1. CLI arguments
2. Environment variables
3. Config file
4. Default values

Usage:
    from kwallet.settings import get_settings

    settings = get_settings()
    print(settings.rpc.url)

Environment Variable Naming:
    - Use uppercase with double underscore for nested settings
    - Examples: RPC__URL, TERMINAL__PROMPT, LOGGING__LEVEL
    - Maps to TOML sections: RPC__URL -> [rpc] url
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from kwallet.models import NetworkType, TerminalTarget
from kwallet.paths import DATA_DIR_ENV, DEFAULT_DATA_DIR_NAME, get_default_data_dir

CONFIG_FILE_ENV = "KASPA_WALLET_CONFIG_FILE"


class RpcSettings(BaseModel):
    """Node RPC connection configuration."""

    url: str = Field(
        default="ws://127.0.0.1:17110",
        description="Kaspa node wRPC (JSON) websocket URL",
    )
    network: NetworkType = Field(
        default=NetworkType.MAINNET,
        description="Kaspa network (mainnet, testnet, devnet, simnet)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for a single RPC request",
    )


class TerminalSettings(BaseModel):
    """Interactive terminal configuration."""

    prompt: str = Field(
        default="$ ",
        description="Prompt shown before each input line",
    )
    history: bool = Field(
        default=True,
        description="Persist command history between sessions",
    )
    history_file: str | None = Field(
        default=None,
        description="Path to the history file (defaults to <data_dir>/history)",
    )
    target: TerminalTarget = Field(
        default=TerminalTarget.TTY,
        description="Rendering target: tty (line editing) or stdio (plain lines)",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Log level: TRACE, DEBUG, INFO, WARNING, ERROR",
    )
    pipe_to_terminal: bool = Field(
        default=True,
        description="Route log output to the interactive terminal while a session runs",
    )


class WalletCliSettings(BaseSettings):
    """
    Main settings class.

    Loads configuration from multiple sources with the following priority:
    1. CLI arguments (passed as constructor overrides)
    2. Environment variables
    3. TOML config file (~/.kaspa-wallet-cli/config.toml)
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Data directory (defaults to ~/.kaspa-wallet-cli)",
    )

    rpc: RpcSettings = Field(default_factory=RpcSettings)
    terminal: TerminalSettings = Field(default_factory=TerminalSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources and their priority.

        Priority (highest to lowest):
        1. init_settings (CLI arguments passed to constructor)
        2. env_settings (environment variables with __ delimiter)
        3. toml_settings (config.toml file)
        4. defaults (in field definitions)
        """
        toml_source = TomlConfigSettingsSource(settings_cls)
        return (
            init_settings,
            env_settings,
            toml_source,
        )

    def get_data_dir(self) -> Path:
        """Get the data directory, using default if not set."""
        if self.data_dir is not None:
            return self.data_dir
        return get_default_data_dir()

    def get_history_file(self) -> Path | None:
        """Get the history file path, or None when history is disabled."""
        if not self.terminal.history:
            return None
        if self.terminal.history_file:
            return Path(self.terminal.history_file).expanduser()
        return self.get_data_dir() / "history"


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """
    Settings source that reads from a TOML config file.

    The config file is expected at ~/.kaspa-wallet-cli/config.toml,
    $KASPA_WALLET_DATA_DIR/config.toml, or $KASPA_WALLET_CONFIG_FILE.
    """

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._config: dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        config_path = get_config_path()

        if not config_path.exists():
            logger.debug(f"Config file not found at {config_path}, using defaults")
            return

        import tomllib

        try:
            with open(config_path, "rb") as f:
                self._config = tomllib.load(f)

            logger.info(f"Loaded config from {config_path}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Invalid TOML syntax in config file {config_path}")
            logger.error(f"Error: {e}")
            logger.error("Please fix the syntax errors in your config file and try again.")
            sys.exit(1)
        except OSError as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            sys.exit(1)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        value = self._config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._config


def get_config_path() -> Path:
    """Get the path to the config file."""
    env_path = os.environ.get(CONFIG_FILE_ENV)
    if env_path:
        return Path(env_path)

    data_dir_env = os.environ.get(DATA_DIR_ENV)
    data_dir = Path(data_dir_env) if data_dir_env else Path.home() / DEFAULT_DATA_DIR_NAME
    return data_dir / "config.toml"


def generate_config_template() -> str:
    """
    Generate a config file template with all settings commented out.

    Users uncomment only what they want to change, so unchanged defaults
    can move with software updates.
    """
    lines: list[str] = [
        "# Kaspa Wallet CLI Configuration",
        "#",
        "# Settings are commented out by default - uncomment to override.",
        "#",
        "# Priority (highest to lowest):",
        "#   1. CLI arguments",
        "#   2. Environment variables",
        "#   3. This config file",
        "#   4. Built-in defaults",
        "#",
        "# Environment variables use uppercase with double underscore for nesting:",
        "#   RPC__URL=ws://127.0.0.1:17110",
        "#   LOGGING__LEVEL=DEBUG",
        "#",
        "",
    ]

    def add_section(title: str, model_cls: type[BaseModel], prefix: str) -> None:
        lines.append(f"# {'=' * 60}")
        lines.append(f"# {title}")
        lines.append(f"# {'=' * 60}")
        lines.append(f"[{prefix}]")
        lines.append("")

        for field_name, field_info in model_cls.model_fields.items():
            if field_info.description:
                lines.append(f"# {field_info.description}")

            default = field_info.default
            if isinstance(default, bool):
                value_str = str(default).lower()
            elif isinstance(default, Enum):
                value_str = f'"{default.value}"'
            elif isinstance(default, str):
                value_str = f'"{default}"'
            elif default is None:
                lines.append(f"# {field_name} = ")
                lines.append("")
                continue
            else:
                value_str = str(default)

            lines.append(f"# {field_name} = {value_str}")
            lines.append("")

    lines.append("# Data directory for history and config")
    lines.append("# Defaults to ~/.kaspa-wallet-cli or $KASPA_WALLET_DATA_DIR")
    lines.append("# data_dir = ")
    lines.append("")

    add_section("RPC Settings", RpcSettings, "rpc")
    add_section("Terminal Settings", TerminalSettings, "terminal")
    add_section("Logging Settings", LoggingSettings, "logging")

    return "\n".join(lines)


def ensure_config_file(data_dir: Path | None = None) -> Path:
    """
    Ensure the config file exists, creating a template if it doesn't.

    Args:
        data_dir: Optional data directory path. Uses default if not provided.

    Returns:
        Path to the config file.
    """
    if data_dir is None:
        data_dir = get_default_data_dir()

    config_path = data_dir / "config.toml"

    if not config_path.exists():
        logger.info(f"Creating config file template at {config_path}")
        data_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(generate_config_template())

    return config_path


# Global settings instance (lazy-loaded)
_settings: WalletCliSettings | None = None


def get_settings(**overrides: Any) -> WalletCliSettings:
    """
    Get the settings instance.

    On first call, loads settings from all sources. Subsequent calls
    return the cached instance unless reset_settings() is called.

    Args:
        **overrides: Optional settings overrides (highest priority)
    """
    global _settings
    if _settings is None or overrides:
        _settings = WalletCliSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None


__all__ = [
    "WalletCliSettings",
    "RpcSettings",
    "TerminalSettings",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
    "get_config_path",
    "generate_config_template",
    "ensure_config_file",
]
