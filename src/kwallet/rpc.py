"""
JSON wRPC client for a Kaspa node, over websockets.

Wire format:
    request:       {"id": 1, "method": "getInfo", "params": {}}
    response:      {"id": 1, "result": {...}}
    error:         {"id": 1, "error": {"message": "..."}}
    notification:  {"method": "VirtualDaaScoreChanged", "params": {...}}

Responses are matched to requests by id. Messages that carry a method and no
id are notifications; they are pushed to the notification queue returned by
notification_channel_receiver(), in arrival order.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import websockets
from loguru import logger
from pydantic import ValidationError
from websockets.exceptions import ConnectionClosed, WebSocketException

from kwallet.errors import RpcError
from kwallet.models import NotificationEvent, NotificationScope

# Timeout for regular RPC calls (seconds)
DEFAULT_RPC_TIMEOUT = 30.0

# Node messages can carry full block templates
MAX_MESSAGE_SIZE = 16 * 1024 * 1024


class RpcClient:
    """
    Websocket RPC client.

    Usage:
        rpc = RpcClient("ws://127.0.0.1:17110")
        await rpc.connect()
        info = await rpc.get_info()
        await rpc.subscribe(NotificationScope.VIRTUAL_DAA_SCORE_CHANGED)
        event = await rpc.notification_channel_receiver().get()
        await rpc.disconnect()
    """

    def __init__(self, url: str, timeout: float = DEFAULT_RPC_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self._websocket: Any | None = None
        self._receive_task: asyncio.Task[None] | None = None
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._request_id = 0
        self._notifications: asyncio.Queue[NotificationEvent] = asyncio.Queue()

    @property
    def is_connected(self) -> bool:
        return self._websocket is not None

    def notification_channel_receiver(self) -> asyncio.Queue[NotificationEvent]:
        return self._notifications

    async def connect(self) -> None:
        if self._websocket is not None:
            return

        logger.info(f"Connecting to {self.url}")
        try:
            self._websocket = await websockets.connect(self.url, max_size=MAX_MESSAGE_SIZE)
        except (OSError, WebSocketException) as e:
            raise RpcError(f"unable to connect to {self.url}: {e}") from e

        self._receive_task = asyncio.create_task(self._receive_loop(), name="rpc-receive")
        logger.info(f"Connected to {self.url}")

    async def disconnect(self) -> None:
        websocket = self._websocket
        if websocket is None:
            return

        self._websocket = None
        await websocket.close()
        if self._receive_task is not None:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"RPC receive task for {self.url} failed: {e}")
            self._receive_task = None

        self._fail_pending(RpcError("RPC connection closed"))
        logger.info(f"Disconnected from {self.url}")

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """
        Send a request and wait for its response.

        Raises:
            RpcError: If not connected, on timeout, or when the node returns an error
        """
        if self._websocket is None:
            raise RpcError(f"RPC is not connected ({method})")

        self._request_id += 1
        request_id = self._request_id
        payload = {"id": request_id, "method": method, "params": params or {}}

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._websocket.send(json.dumps(payload))
            return await asyncio.wait_for(future, timeout=self.timeout)
        except TimeoutError:
            raise RpcError(f"RPC request '{method}' timed out after {self.timeout}s") from None
        except ConnectionClosed as e:
            raise RpcError(f"RPC connection closed during '{method}': {e}") from e
        finally:
            self._pending.pop(request_id, None)

    async def _receive_loop(self) -> None:
        websocket = self._websocket
        if websocket is None:
            return
        try:
            async for raw in websocket:
                self._dispatch(raw)
        except ConnectionClosed as e:
            logger.warning(f"RPC connection to {self.url} closed: {e}")
        finally:
            self._fail_pending(RpcError("RPC connection closed"))

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed RPC message: {e}")
            return
        if not isinstance(message, dict):
            logger.warning(f"Ignoring unexpected RPC message: {message!r}")
            return

        request_id = message.get("id")
        if request_id is not None:
            if not isinstance(request_id, int):
                logger.warning(f"Ignoring RPC response with invalid id: {request_id!r}")
                return
            future = self._pending.get(request_id)
            if future is None or future.done():
                logger.debug(f"Dropping response for unknown request id {request_id}")
                return
            error = message.get("error")
            if error is not None:
                detail = error.get("message", error) if isinstance(error, dict) else error
                future.set_exception(RpcError(str(detail)))
            else:
                future.set_result(message.get("result"))
            return

        method = message.get("method")
        if isinstance(method, str) and method:
            params = message.get("params")
            try:
                event = NotificationEvent(
                    op=method, payload=params if isinstance(params, dict) else {}
                )
            except ValidationError as e:
                logger.warning(f"Ignoring malformed notification {method!r}: {e}")
                return
            self._notifications.put_nowait(event)
            return

        logger.debug(f"Ignoring RPC message without id or method: {message!r}")

    def _fail_pending(self, error: RpcError) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(error)
        self._pending.clear()

    async def get_info(self) -> dict[str, Any]:
        return await self.call("getInfo")

    async def ping(self) -> None:
        await self.call("ping")

    async def subscribe(self, scope: NotificationScope) -> None:
        await self.call("subscribe", {"scope": scope.value})

    async def unsubscribe(self, scope: NotificationScope) -> None:
        await self.call("unsubscribe", {"scope": scope.value})
