"""
Pytest configuration and fixtures for kwallet tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from _kwallet_test_helpers import TEST_ADDRESS, WALLET_COMMAND_METHODS, FakeTerminal
from pytest import StashKey

from kwallet.settings import reset_settings

_fail_on_skip_key: StashKey[bool] = StashKey[bool]()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--fail-on-skip",
        action="store_true",
        default=False,
        help="Treat skipped tests as failures (for CI to catch missing setup)",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.stash[_fail_on_skip_key] = config.getoption("--fail-on-skip", default=False)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_makereport(
    item: pytest.Item,
    call: pytest.CallInfo[None],
) -> pytest.TestReport | None:
    """Convert skipped tests to failures when --fail-on-skip is enabled."""
    from _pytest.runner import pytest_runtest_makereport as orig_makereport

    report = orig_makereport(item, call)  # type: ignore[arg-type]
    if item.config.stash.get(_fail_on_skip_key, False) and report.skipped:
        report.outcome = "failed"
        report.longrepr = f"Test was skipped but --fail-on-skip is enabled: {report.longrepr}"
    return report  # type: ignore[return-value]


@pytest.fixture(autouse=True)
def reset_settings_fixture(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Isolate settings from the user's data directory and environment."""
    data_dir = tmp_path_factory.mktemp("kwallet-data")
    monkeypatch.setenv("KASPA_WALLET_DATA_DIR", str(data_dir))
    monkeypatch.delenv("KASPA_WALLET_CONFIG_FILE", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def notification_queue() -> asyncio.Queue:
    return asyncio.Queue()


@pytest.fixture
def mock_wallet(notification_queue: asyncio.Queue) -> MagicMock:
    """Wallet double whose command methods are AsyncMocks."""
    wallet = MagicMock()
    for name in WALLET_COMMAND_METHODS:
        setattr(wallet, name, AsyncMock(return_value=None))
    wallet.get_info = AsyncMock(return_value="server_version: 0.11.0")
    wallet.new_address = AsyncMock(return_value=TEST_ADDRESS)
    wallet.start = AsyncMock()
    wallet.stop = AsyncMock()
    wallet.notification_channel_receiver = MagicMock(return_value=notification_queue)
    return wallet
