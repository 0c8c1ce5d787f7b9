"""
Shared path utilities for the wallet CLI data directory.
"""

from __future__ import annotations

import os
from pathlib import Path

DATA_DIR_ENV = "KASPA_WALLET_DATA_DIR"
DEFAULT_DATA_DIR_NAME = ".kaspa-wallet-cli"


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    Returns ~/.kaspa-wallet-cli or $KASPA_WALLET_DATA_DIR if set.
    Creates the directory if it doesn't exist.
    """
    env_path = os.getenv(DATA_DIR_ENV)
    data_dir = Path(env_path) if env_path else Path.home() / DEFAULT_DATA_DIR_NAME

    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
