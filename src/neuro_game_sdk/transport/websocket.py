from __future__ import annotations

"""WebSocket transport running inside the caller's asyncio event loop."""

import asyncio
import logging
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.protocol import State

from .base import BaseTransport, TransportNotOpenError

logger = logging.getLogger(__name__)


class WebSocketTransport(BaseTransport):
    """Client transport built on :mod:`websockets`.

    :meth:`open` must be called while an event loop is running. Outgoing
    frames are queued and written in order by a writer task, so
    :meth:`send` never blocks the caller.
    """

    name = "websocket"

    def __init__(
        self, *, open_timeout: float = 10.0, ping_interval: Optional[float] = 20.0
    ) -> None:
        super().__init__()
        self.open_timeout = open_timeout
        self.ping_interval = ping_interval
        self._ws: Optional[ClientConnection] = None
        self._outbox: Optional["asyncio.Queue[Optional[str]]"] = None
        self._task: Optional["asyncio.Task[None]"] = None
        self._closing = False

    @property
    def is_open(self) -> bool:
        return (
            self._ws is not None
            and self._ws.state is State.OPEN
            and not self._closing
        )

    def open(self, url: str) -> None:
        if self._task is not None:
            raise RuntimeError("WebSocketTransport can only be opened once")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(url))

    def send(self, text: str) -> None:
        if not self.is_open or self._outbox is None:
            raise TransportNotOpenError("WebSocket is not open")
        self._outbox.put_nowait(text)

    def close(self) -> None:
        if self._closing or self._task is None:
            return
        self._closing = True
        if self._ws is not None and self._outbox is not None:
            # queued frames are flushed before the close handshake
            self._outbox.put_nowait(None)
        else:
            self._task.cancel()

    async def wait_closed(self) -> None:
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self, url: str) -> None:
        code: Optional[int] = None
        reason = ""
        try:
            async with connect(
                url,
                open_timeout=self.open_timeout,
                ping_interval=self.ping_interval,
            ) as ws:
                self._ws = ws
                self._outbox = asyncio.Queue()
                writer = asyncio.create_task(self._drain(ws, self._outbox))
                try:
                    logger.debug("Connected to %s", url)
                    try:
                        self.on_open()
                    except Exception:
                        logger.exception("Error handling connection open")
                    await self._read(ws)
                finally:
                    writer.cancel()
                    await asyncio.gather(writer, return_exceptions=True)
                code, reason = ws.close_code, ws.close_reason or ""
        except asyncio.CancelledError:
            logger.debug("Connection to %s cancelled", url)
            raise
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            logger.debug("Connection to %s failed: %s (%s)", url, exc, type(exc).__name__)
            self.on_error(exc)
        finally:
            self._ws = None
            self._outbox = None
            self._closing = True
            self.on_close(code, reason)

    async def _read(self, ws: ClientConnection) -> None:
        try:
            async for frame in ws:
                if isinstance(frame, bytes):
                    frame = frame.decode("utf-8", errors="replace")
                try:
                    self.on_message(frame)
                except Exception:
                    logger.exception("Error processing frame")
        except ConnectionClosed as exc:
            logger.debug("Connection closed abnormally: %s", exc)

    @staticmethod
    async def _drain(ws: ClientConnection, outbox: "asyncio.Queue[Optional[str]]") -> None:
        try:
            while True:
                text = await outbox.get()
                if text is None:
                    await ws.close()
                    return
                await ws.send(text)
        except ConnectionClosed as exc:
            logger.debug("Dropping queued frames, connection closed: %s", exc)
