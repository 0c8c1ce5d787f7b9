"""
Notification bridge: relays node notifications to the terminal.

The bridge is one long-lived asyncio task. Each iteration waits on two
sources at once, a stop request and the next notification from the wallet's
receiver, and handles whichever is ready first. Stopping is cooperative: the
owner sends a request through a DuplexChannel and waits for the task to
acknowledge, after which the bridge writes nothing more.

Usage:
    bridge = NotificationBridge(wallet.notification_channel_receiver(), term.pipe_crlf)
    bridge.start()
    ...
    await bridge.stop()  # returns once the task has acknowledged
"""

from __future__ import annotations

import asyncio
import json
from typing import Protocol

from loguru import logger

from kwallet.errors import (
    BridgeAlreadyRunningError,
    BridgeError,
    BridgeNotRunningError,
    TerminalClosedError,
)
from kwallet.models import NotificationEvent


class NotificationReceiver(Protocol):
    async def get(self) -> NotificationEvent: ...


class CrlfOutput(Protocol):
    async def send(self, text: str) -> None: ...


class DuplexChannel:
    """
    One-shot request/response rendezvous.

    The requester calls signal() and blocks until the responder calls
    acknowledge(). Both sides hold a single slot, so a second request or a
    second acknowledgment on the same channel fails.
    """

    def __init__(self) -> None:
        self.request: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
        self.response: asyncio.Queue[None] = asyncio.Queue(maxsize=1)

    async def signal(self) -> None:
        try:
            self.request.put_nowait(None)
        except asyncio.QueueFull:
            raise BridgeError("stop already requested on this channel") from None
        await self.response.get()

    def acknowledge(self) -> None:
        try:
            self.response.put_nowait(None)
        except asyncio.QueueFull:
            raise BridgeError("stop already acknowledged on this channel") from None


def format_notification(event: NotificationEvent) -> str:
    """
    Render an event as a multi-line debug block with CRLF line endings.
    """
    body = json.dumps(event.payload, indent=4, sort_keys=True, default=str)
    text = f"Notification {event.op} {body}"
    return text.replace("\r\n", "\n").replace("\n", "\r\n")


class NotificationBridge:
    def __init__(
        self,
        receiver: NotificationReceiver,
        output: CrlfOutput,
        name: str = "notification-bridge",
    ):
        self.receiver = receiver
        self.output = output
        self.name = name
        self._ctl: DuplexChannel | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """
        Spawn the relay task.

        Raises:
            BridgeAlreadyRunningError: If the bridge is already running
        """
        if self._task is not None:
            raise BridgeAlreadyRunningError(f"{self.name} is already running")

        self._ctl = DuplexChannel()
        self._task = asyncio.create_task(self._run(self._ctl), name=self.name)
        logger.debug(f"{self.name} started")

    async def stop(self) -> None:
        """
        Ask the relay task to stop and wait for its acknowledgment.

        Raises:
            BridgeNotRunningError: If there is no matching start()
        """
        if self._task is None or self._ctl is None:
            raise BridgeNotRunningError(f"{self.name} is not running")

        ctl, task = self._ctl, self._task
        self._ctl = None
        self._task = None

        await ctl.signal()
        await task
        logger.debug(f"{self.name} stopped")

    async def _run(self, ctl: DuplexChannel) -> None:
        stop_requested = asyncio.ensure_future(ctl.request.get())
        next_event: asyncio.Future[NotificationEvent] | None = None
        try:
            while True:
                next_event = asyncio.ensure_future(self.receiver.get())
                done, _ = await asyncio.wait(
                    {stop_requested, next_event},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if stop_requested in done:
                    # An event received in the same wakeup is dropped
                    break
                await self._relay(next_event.result())
        except Exception as e:
            logger.error(f"{self.name} terminated unexpectedly: {e}")
        finally:
            if next_event is not None:
                next_event.cancel()
            stop_requested.cancel()
            try:
                ctl.acknowledge()
            except BridgeError as e:
                logger.error(f"{self.name} unable to signal task shutdown: {e}")

    async def _relay(self, event: NotificationEvent) -> None:
        text = format_notification(event)
        try:
            await self.output.send(text)
        except TerminalClosedError as e:
            logger.debug(f"{self.name} dropped notification {event.op}: {e}")
        except Exception as e:
            logger.error(f"{self.name} unable to route notification to terminal: {e}")
