"""
Tests for the unified settings module.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from kwallet.models import NetworkType, TerminalTarget
from kwallet.settings import (
    WalletCliSettings,
    ensure_config_file,
    generate_config_template,
    get_config_path,
    get_settings,
)


@pytest.fixture
def temp_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary data directory and set it as KASPA_WALLET_DATA_DIR."""
    data_dir = tmp_path / ".kaspa-wallet-cli"
    data_dir.mkdir(parents=True)
    monkeypatch.setenv("KASPA_WALLET_DATA_DIR", str(data_dir))
    return data_dir


class TestConfigTemplate:
    """Tests for config template generation."""

    def test_generate_config_template(self) -> None:
        template = generate_config_template()

        assert "# Kaspa Wallet CLI Configuration" in template
        assert "# Priority (highest to lowest):" in template

        assert "[rpc]" in template
        assert "[terminal]" in template
        assert "[logging]" in template

        # Settings are commented out
        assert '# url = "ws://127.0.0.1:17110"' in template
        assert '# network = "mainnet"' in template
        assert "# history = true" in template
        assert "# history_file = " in template

    def test_ensure_config_file_creates_template(self, temp_data_dir: Path) -> None:
        config_path = temp_data_dir / "config.toml"
        assert not config_path.exists()

        result = ensure_config_file(temp_data_dir)

        assert result == config_path
        assert "# Kaspa Wallet CLI Configuration" in config_path.read_text()

    def test_ensure_config_file_does_not_overwrite(self, temp_data_dir: Path) -> None:
        config_path = temp_data_dir / "config.toml"
        config_path.write_text("# Custom config\n[rpc]\nurl = 'ws://custom:17110'\n")

        ensure_config_file(temp_data_dir)

        assert "# Custom config" in config_path.read_text()

    def test_template_loads_as_defaults(self, temp_data_dir: Path) -> None:
        ensure_config_file(temp_data_dir)

        settings = WalletCliSettings()

        assert settings.rpc.url == "ws://127.0.0.1:17110"


class TestSettingsDefaults:
    def test_defaults(self) -> None:
        settings = WalletCliSettings()

        assert settings.rpc.url == "ws://127.0.0.1:17110"
        assert settings.rpc.network == NetworkType.MAINNET
        assert settings.rpc.timeout == 30.0
        assert settings.terminal.prompt == "$ "
        assert settings.terminal.history is True
        assert settings.terminal.target == TerminalTarget.TTY
        assert settings.logging.level == "INFO"
        assert settings.logging.pipe_to_terminal is True

    def test_history_file_defaults_to_data_dir(self, temp_data_dir: Path) -> None:
        settings = WalletCliSettings()
        assert settings.get_history_file() == temp_data_dir / "history"

    def test_history_disabled(self) -> None:
        settings = WalletCliSettings(terminal={"history": False})
        assert settings.get_history_file() is None


class TestSettingsFromEnv:
    def test_env_override_rpc_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RPC__URL", "ws://kaspad:17110")
        monkeypatch.setenv("RPC__NETWORK", "testnet")
        monkeypatch.setenv("RPC__TIMEOUT", "5")

        settings = WalletCliSettings()

        assert settings.rpc.url == "ws://kaspad:17110"
        assert settings.rpc.network == NetworkType.TESTNET
        assert settings.rpc.timeout == 5.0

    def test_env_override_terminal_target(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMINAL__TARGET", "stdio")

        settings = WalletCliSettings()

        assert settings.terminal.target == TerminalTarget.STDIO


class TestSettingsFromToml:
    def test_toml_override_settings(self, temp_data_dir: Path) -> None:
        (temp_data_dir / "config.toml").write_text("""
[rpc]
url = "ws://node:17210"
network = "testnet"

[terminal]
prompt = "kaspa> "

[logging]
level = "DEBUG"
""")

        settings = WalletCliSettings()

        assert settings.rpc.url == "ws://node:17210"
        assert settings.rpc.network == NetworkType.TESTNET
        assert settings.terminal.prompt == "kaspa> "
        assert settings.logging.level == "DEBUG"

    def test_env_overrides_toml(self, temp_data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (temp_data_dir / "config.toml").write_text('[rpc]\nurl = "ws://toml:17110"\n')
        monkeypatch.setenv("RPC__URL", "ws://env:17110")

        settings = WalletCliSettings()

        assert settings.rpc.url == "ws://env:17110"

    def test_invalid_toml_exits(self, temp_data_dir: Path) -> None:
        (temp_data_dir / "config.toml").write_text("[rpc\nurl = ")

        with pytest.raises(SystemExit):
            WalletCliSettings()


class TestConfigPath:
    def test_explicit_config_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        monkeypatch.setenv("KASPA_WALLET_CONFIG_FILE", str(config_file))
        assert get_config_path() == config_file

    def test_data_dir_config_file(self, temp_data_dir: Path) -> None:
        assert get_config_path() == temp_data_dir / "config.toml"


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_overrides_rebuild(self) -> None:
        first = get_settings()
        second = get_settings(rpc={"url": "ws://other:17110"})
        assert second is not first
        assert second.rpc.url == "ws://other:17110"
