from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from neuro_game_sdk.client import ConnectionState, NeuroClient
from neuro_game_sdk.utils.logsink import LogLevel

from conftest import FakeTransport, RecordingSink, TransportFactory


def _refuse(url: str) -> None:
    raise RuntimeError("no running event loop")


def _client(sink: RecordingSink, transports: TransportFactory, **kwargs) -> NeuroClient:
    return NeuroClient("ws://neuro.test", "Test Game", log_sink=sink, transport=transports, **kwargs)


def test_open_sends_startup_before_on_connected(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    seen: List[List[str]] = []
    client = _client(sink, transports, on_connected=lambda: seen.append(transports.last.commands()))

    client.connect()
    assert client.state is ConnectionState.CONNECTING
    assert transports.last.url == "ws://neuro.test"

    transports.last.accept()
    assert client.state is ConnectionState.OPEN
    assert transports.last.frames() == [{"command": "startup", "game": "Test Game"}]
    assert seen == [["startup"]]


def test_send_while_not_open_is_logged_and_dropped(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    client = _client(sink, transports)
    client.send_context("hello")

    assert client.state is ConnectionState.DISCONNECTED
    assert transports.created == []
    assert any("not open" in m for m in sink.at(LogLevel.ERROR))


def test_context_payload(client: NeuroClient, transports: TransportFactory) -> None:
    client.send_context("A door opened.", silent=True)
    assert transports.last.frames() == [
        {
            "command": "context",
            "game": "Test Game",
            "data": {"message": "A door opened.", "silent": True},
        }
    ]


def test_failed_result_without_message_warns(
    client: NeuroClient, sink: RecordingSink, transports: TransportFactory
) -> None:
    client.send_action_result("id-1", True)
    assert sink.at(LogLevel.WARN) == []
    client.send_action_result("id-2", False)
    assert len(sink.at(LogLevel.WARN)) == 1
    assert transports.last.frames()[-1]["data"] == {"id": "id-2", "success": False}


def test_malformed_frames_and_unknown_commands_are_absorbed(
    client: NeuroClient, sink: RecordingSink, transports: TransportFactory
) -> None:
    transports.last.deliver("{oops")
    transports.last.deliver({"command": "dance"})

    assert len(sink.at(LogLevel.ERROR)) == 1
    assert sink.at(LogLevel.WARN) == ["Received unknown/unimplemented command: dance"]
    assert transports.last.sent == []
    assert client.state is ConnectionState.OPEN


def test_disconnect_twice_reports_one_close(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    closes: List[Tuple[Optional[int], str]] = []
    client = _client(sink, transports, on_close=lambda code, reason: closes.append((code, reason)))
    client.connect()
    transports.last.accept()

    client.disconnect()
    client.disconnect()

    assert closes == [(1000, "")]
    assert transports.last.close_calls == 1
    assert client.state is ConnectionState.CLOSED
    assert sink.at(LogLevel.ERROR) == []


def test_disconnect_before_connect_is_a_no_op(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    client = _client(sink, transports)
    client.disconnect()
    assert client.state is ConnectionState.DISCONNECTED
    assert sink.records == []


def test_transport_close_without_callback_is_logged(
    client: NeuroClient, sink: RecordingSink, transports: TransportFactory
) -> None:
    transports.last.drop(1006, "gone")

    assert client.state is ConnectionState.CLOSED
    assert any("code=1006" in m for m in sink.at(LogLevel.LOG))


def test_failed_open_leaves_client_disconnected(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    def flaky() -> FakeTransport:
        transport = transports()
        if len(transports.created) == 1:
            transport.open = _refuse  # type: ignore[assignment]
        return transport

    client = _client(sink, flaky)  # type: ignore[arg-type]
    with pytest.raises(RuntimeError, match="no running event loop"):
        client.connect()
    assert client.state is ConnectionState.DISCONNECTED
    assert client.connection.transport is None

    client.connect()
    assert client.state is ConnectionState.CONNECTING
    transports.last.accept()
    assert client.state is ConnectionState.OPEN


def test_transport_error_goes_to_callback(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    errors: List[BaseException] = []
    client = _client(sink, transports, on_error=errors.append)
    client.connect()
    failure = ConnectionRefusedError("refused")
    transports.last.on_error(failure)

    assert errors == [failure]
    assert client.state is ConnectionState.CLOSED


def test_reconnect_replaces_transport_and_keeps_registry(
    client: NeuroClient, transports: TransportFactory
) -> None:
    client.register_actions([{"name": "wave", "description": "Wave."}])
    old = transports.last

    client.reconnect("ws://other.test")

    assert old.close_calls == 1
    assert len(transports.created) == 2
    assert transports.last.url == "ws://other.test"
    assert client.state is ConnectionState.CONNECTING
    assert client.registry.names() == ["wave"]

    old.deliver({"command": "actions/reregister_all"})
    assert transports.last.sent == []

    transports.last.accept()
    assert transports.last.commands() == ["startup"]


def test_reconnect_without_url_reuses_endpoint(
    client: NeuroClient, transports: TransportFactory
) -> None:
    client.disconnect()
    client.reconnect()
    assert transports.last.url == "ws://neuro.test"
    assert len(transports.created) == 2


def test_dev_mode_logs_frames(sink: RecordingSink, transports: TransportFactory) -> None:
    client = _client(sink, transports, dev_mode=True)
    client.connect()
    transports.last.accept()
    transports.last.deliver({"command": "dance"})

    debug = sink.at(LogLevel.DEBUG)
    assert any(m.startswith("--> ") and "startup" in m for m in debug)
    assert any(m.startswith("<-- ") and "dance" in m for m in debug)


def test_shutdown_commands_reach_callbacks(
    sink: RecordingSink, transports: TransportFactory
) -> None:
    graceful: List[bool] = []
    immediate: List[bool] = []
    client = _client(
        sink,
        transports,
        on_graceful_shutdown=graceful.append,
        on_immediate_shutdown=lambda: immediate.append(True),
    )
    client.connect()
    transports.last.accept()

    transports.last.deliver({"command": "shutdown/graceful", "data": {"wants_shutdown": True}})
    transports.last.deliver({"command": "shutdown/immediate"})

    assert graceful == [True]
    assert immediate == [True]


def test_shutdown_without_callbacks_is_ignored(
    client: NeuroClient, sink: RecordingSink, transports: TransportFactory
) -> None:
    transports.last.deliver({"command": "shutdown/graceful", "data": {"wants_shutdown": False}})
    assert any("graceful shutdown" in m for m in sink.at(LogLevel.INFO))
    assert transports.last.sent == []
