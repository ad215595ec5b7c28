from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from neuro_game_sdk.client import NeuroClient
from neuro_game_sdk.transport.base import BaseTransport, TransportNotOpenError
from neuro_game_sdk.utils.logsink import LogLevel


class FakeTransport(BaseTransport):
    """In-memory transport; tests drive its events by hand."""

    name = "fake"

    def __init__(self) -> None:
        super().__init__()
        self.url: Optional[str] = None
        self.sent: List[str] = []
        self.close_calls = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, url: str) -> None:
        self.url = url

    def send(self, text: str) -> None:
        if not self._open:
            raise TransportNotOpenError("WebSocket is not open")
        self.sent.append(text)

    def close(self) -> None:
        self.close_calls += 1
        if self._open:
            self._open = False
            self.on_close(1000, "")

    def accept(self) -> None:
        self._open = True
        self.on_open()

    def deliver(self, payload: Union[str, Dict[str, Any]]) -> None:
        self.on_message(payload if isinstance(payload, str) else json.dumps(payload))

    def drop(self, code: int = 1006, reason: str = "gone") -> None:
        self._open = False
        self.on_close(code, reason)

    def frames(self) -> List[Dict[str, Any]]:
        return [json.loads(text) for text in self.sent]

    def commands(self) -> List[str]:
        return [frame["command"] for frame in self.frames()]


class TransportFactory:
    def __init__(self) -> None:
        self.created: List[FakeTransport] = []

    def __call__(self) -> FakeTransport:
        transport = FakeTransport()
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


class RecordingSink:
    def __init__(self) -> None:
        self.records: List[Tuple[str, LogLevel]] = []

    def __call__(self, message: str, level: LogLevel) -> None:
        self.records.append((message, level))

    def at(self, level: LogLevel) -> List[str]:
        return [message for message, lvl in self.records if lvl == level]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def transports() -> TransportFactory:
    return TransportFactory()


@pytest.fixture
def client(sink: RecordingSink, transports: TransportFactory) -> NeuroClient:
    """A client whose transport is open, with the startup frame cleared."""

    neuro = NeuroClient("ws://neuro.test", "Test Game", log_sink=sink, transport=transports)
    neuro.connect()
    transports.last.accept()
    transports.last.sent.clear()
    return neuro


GUESS_SCHEMA = {
    "type": "object",
    "properties": {"number": {"type": "integer", "minimum": 1, "maximum": 10}},
}
