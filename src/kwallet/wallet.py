"""
Wallet backend driven by the interactive CLI.

The wallet owns the node RPC connection and the notification stream. Node
queries (info, ping, DAA score subscriptions) are served over RPC; account,
key and transaction operations are not implemented by this backend and fail
with UnsupportedOperationError, which the CLI reports like any other
backend error.
"""

from __future__ import annotations

import asyncio
import json

from loguru import logger

from kwallet.errors import UnsupportedOperationError
from kwallet.models import NetworkType, NotificationEvent, NotificationScope
from kwallet.rpc import RpcClient
from kwallet.settings import WalletCliSettings


class Wallet:
    def __init__(self, rpc: RpcClient, network: NetworkType = NetworkType.MAINNET):
        self.rpc = rpc
        self.network = network
        self._started = False

    @classmethod
    async def try_new(cls, settings: WalletCliSettings) -> Wallet:
        rpc = RpcClient(settings.rpc.url, timeout=settings.rpc.timeout)
        logger.debug(f"Wallet created for {settings.rpc.network.value} ({settings.rpc.url})")
        return cls(rpc, network=settings.rpc.network)

    def notification_channel_receiver(self) -> asyncio.Queue[NotificationEvent]:
        return self.rpc.notification_channel_receiver()

    async def start(self) -> None:
        """Connect to the node; notifications start flowing once subscribed."""
        await self.rpc.connect()
        self._started = True

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        await self.rpc.disconnect()

    async def get_info(self) -> str:
        info = await self.rpc.get_info()
        return json.dumps(info, indent=4, sort_keys=True, default=str)

    async def ping(self) -> None:
        await self.rpc.ping()

    async def subscribe_daa_score(self) -> None:
        await self.rpc.subscribe(NotificationScope.VIRTUAL_DAA_SCORE_CHANGED)
        logger.info("Subscribed to DAA score notifications")

    async def unsubscribe_daa_score(self) -> None:
        await self.rpc.unsubscribe(NotificationScope.VIRTUAL_DAA_SCORE_CHANGED)
        logger.info("Unsubscribed from DAA score notifications")

    async def balance(self) -> None:
        raise UnsupportedOperationError("query-balance")

    async def create(self) -> None:
        raise UnsupportedOperationError("create-wallet")

    async def broadcast(self) -> None:
        raise UnsupportedOperationError("broadcast")

    async def create_unsigned_transaction(self) -> None:
        raise UnsupportedOperationError("create-unsigned-tx")

    async def dump_unencrypted(self) -> None:
        raise UnsupportedOperationError("dump-unencrypted")

    async def new_address(self) -> str:
        raise UnsupportedOperationError("new-address")

    async def parse(self) -> None:
        raise UnsupportedOperationError("parse")

    async def send(self) -> None:
        raise UnsupportedOperationError("send")

    async def show_address(self) -> None:
        raise UnsupportedOperationError("show-address")

    async def sign(self) -> None:
        raise UnsupportedOperationError("sign")

    async def sweep(self) -> None:
        raise UnsupportedOperationError("sweep")
