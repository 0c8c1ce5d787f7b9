"""
Core data models using Pydantic for validation and serialization.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    SIMNET = "simnet"


class TerminalTarget(str, Enum):
    """Where the interactive session renders."""

    TTY = "tty"
    STDIO = "stdio"


class NotificationScope(str, Enum):
    """Node notification streams a wallet can subscribe to."""

    BLOCK_ADDED = "BlockAdded"
    VIRTUAL_CHAIN_CHANGED = "VirtualChainChanged"
    FINALITY_CONFLICT = "FinalityConflict"
    FINALITY_CONFLICT_RESOLVED = "FinalityConflictResolved"
    UTXOS_CHANGED = "UtxosChanged"
    SINK_BLUE_SCORE_CHANGED = "SinkBlueScoreChanged"
    VIRTUAL_DAA_SCORE_CHANGED = "VirtualDaaScoreChanged"
    PRUNING_POINT_UTXO_SET_OVERRIDE = "PruningPointUtxoSetOverride"
    NEW_BLOCK_TEMPLATE = "NewBlockTemplate"


class NotificationEvent(BaseModel):
    """
    A state change pushed by the node (new DAA score, UTXO changes, ...).

    The CLI treats events as opaque: they are rendered, never interpreted.
    """

    model_config = {"frozen": True}

    op: str = Field(..., min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
