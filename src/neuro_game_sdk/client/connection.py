from __future__ import annotations

"""Connection lifecycle and command routing over a transport."""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from ..protocol.codec import MalformedEnvelopeError, decode_message, encode_message
from ..protocol.messages import IncomingCommand, OutgoingCommand
from ..transport.base import BaseTransport, TransportNotOpenError
from ..utils.logsink import LogLevel, LogSink, default_sink

CommandRoute = Callable[[Optional[Dict[str, Any]]], None]
CloseCallback = Callable[[Optional[int], str], None]
ErrorCallback = Callable[[BaseException], None]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """Owns one transport at a time and speaks the envelope protocol over it.

    On open a ``startup`` command is sent before ``on_connected`` runs.
    Inbound frames are decoded and handed to the route registered for their
    command; malformed frames and unknown commands are logged and dropped.
    """

    def __init__(
        self,
        url: str,
        game: str,
        *,
        transport_factory: Callable[[], BaseTransport],
        on_connected: Optional[Callable[[], None]] = None,
        on_close: Optional[CloseCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        sink: LogSink = default_sink,
        dev_mode: bool = False,
    ) -> None:
        self.url = url
        self.game = game
        self.on_connected = on_connected
        self.on_close = on_close
        self.on_error = on_error
        self.sink = sink
        self.dev_mode = dev_mode
        self._transport_factory = transport_factory
        self._transport: Optional[BaseTransport] = None
        self._routes: Dict[IncomingCommand, CommandRoute] = {}
        self._close_reported = False
        self.state = ConnectionState.DISCONNECTED

    @property
    def transport(self) -> Optional[BaseTransport]:
        return self._transport

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def route(self, command: IncomingCommand, handler: CommandRoute) -> None:
        """Deliver the data of every inbound *command* to *handler*."""

        self._routes[command] = handler

    def connect(self) -> None:
        if self.state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
            self.sink(f"Already {self.state.value}, ignoring connect()", LogLevel.DEBUG)
            return
        transport = self._transport_factory()
        transport.on_open = lambda: self._handle_open(transport)
        transport.on_message = lambda text: self._handle_frame(transport, text)
        transport.on_close = lambda code, reason: self._handle_close(transport, code, reason)
        transport.on_error = lambda exc: self._handle_error(transport, exc)
        self._transport = transport
        self._close_reported = False
        self.state = ConnectionState.CONNECTING
        try:
            transport.open(self.url)
        except Exception:
            self._transport = None
            self.state = ConnectionState.DISCONNECTED
            raise

    def disconnect(self) -> None:
        """Close the transport if it is open; otherwise do nothing."""

        if self.state is not ConnectionState.OPEN or self._transport is None:
            return
        self._transport.close()

    def reconnect(self, url: Optional[str] = None) -> None:
        """Tear down the current transport and connect again."""

        transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()
        self.state = ConnectionState.DISCONNECTED
        if url:
            self.url = url
        self.connect()

    async def wait_closed(self) -> None:
        if self._transport is not None:
            await self._transport.wait_closed()

    def send(
        self, command: OutgoingCommand, data: Optional[Mapping[str, Any]] = None
    ) -> None:
        """Encode and send one command; dropped with an error log when not open."""

        transport = self._transport
        if self.state is not ConnectionState.OPEN or transport is None:
            self.sink(
                f"WebSocket is not open (state: {self.state.value}), "
                f"dropping '{command.value}'",
                LogLevel.ERROR,
            )
            return
        frame = encode_message(command.value, self.game, data)
        if self.dev_mode:
            self.sink(f"--> {frame}", LogLevel.DEBUG)
        try:
            transport.send(frame)
        except TransportNotOpenError as exc:
            self.sink(f"{exc}, dropping '{command.value}'", LogLevel.ERROR)

    def _is_current(self, transport: BaseTransport, event: str) -> bool:
        if transport is self._transport:
            return True
        self.sink(f"Ignoring {event} from a replaced transport", LogLevel.DEBUG)
        return False

    def _handle_open(self, transport: BaseTransport) -> None:
        if not self._is_current(transport, "open"):
            return
        self.state = ConnectionState.OPEN
        self.sink("Connected to Neuro-sama server.", LogLevel.LOG)
        self.send(OutgoingCommand.STARTUP)
        if self.on_connected is not None:
            self.on_connected()

    def _handle_frame(self, transport: BaseTransport, text: str) -> None:
        if not self._is_current(transport, "frame"):
            return
        if self.dev_mode:
            self.sink(f"<-- {text}", LogLevel.DEBUG)
        try:
            message = decode_message(text)
        except MalformedEnvelopeError as exc:
            self.sink(str(exc), LogLevel.ERROR)
            return
        command = message.known_command
        handler = self._routes.get(command) if command is not None else None
        if handler is None:
            self.sink(
                f"Received unknown/unimplemented command: {message.command}",
                LogLevel.WARN,
            )
            return
        handler(message.data)

    def _handle_close(
        self, transport: BaseTransport, code: Optional[int], reason: str
    ) -> None:
        if not self._is_current(transport, "close"):
            return
        if self._close_reported:
            return
        self._close_reported = True
        self.state = ConnectionState.CLOSED
        if self.on_close is not None:
            self.on_close(code, reason)
        else:
            self.sink(f"WebSocket connection closed: code={code} reason={reason!r}", LogLevel.LOG)

    def _handle_error(self, transport: BaseTransport, exc: BaseException) -> None:
        if not self._is_current(transport, "error"):
            return
        self.state = ConnectionState.CLOSED
        if self.on_error is not None:
            self.on_error(exc)
        else:
            self.sink(f"WebSocket error: {exc}", LogLevel.ERROR)
