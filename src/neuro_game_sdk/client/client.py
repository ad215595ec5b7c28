from __future__ import annotations

"""Caller-facing client for the Neuro game API."""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..config import Action, ClientSettings
from ..protocol.messages import (
    ActionResultData,
    ContextData,
    ForceActionsData,
    ForcePriority,
    IncomingCommand,
    OutgoingCommand,
)
from ..transport import get_transport
from ..transport.base import BaseTransport
from ..utils.logsink import LogLevel, LogSink, default_sink
from .connection import CloseCallback, Connection, ConnectionState, ErrorCallback
from .dispatch import ActionDispatcher, ActionHandler
from .force import ForceController
from .registry import ActionRegistry

TransportSpec = Union[str, Callable[[], BaseTransport]]


class NeuroClient:
    """Connects a game to Neuro and manages its actions.

    Typical use from inside a running asyncio loop::

        client = NeuroClient("ws://localhost:8000", "My Game", on_connected=setup)
        client.on_action(handle_action)
        client.connect()
        await client.wait_closed()

    With ``validate_actions`` (the default) unknown actions and parameters
    that fail the registered schema are answered automatically; handlers
    only see requests that passed. Handlers must eventually call
    :meth:`send_action_result` for every request they receive.
    """

    def __init__(
        self,
        url: str,
        game: str,
        on_connected: Optional[Callable[[], None]] = None,
        *,
        on_close: Optional[CloseCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_graceful_shutdown: Optional[Callable[[bool], None]] = None,
        on_immediate_shutdown: Optional[Callable[[], None]] = None,
        log_sink: LogSink = default_sink,
        dev_mode: bool = False,
        validate_actions: bool = True,
        transport: TransportSpec = "websocket",
    ) -> None:
        self.log_sink = log_sink
        self.on_graceful_shutdown = on_graceful_shutdown
        self.on_immediate_shutdown = on_immediate_shutdown
        transport_factory = get_transport(transport) if isinstance(transport, str) else transport
        self.connection = Connection(
            url,
            game,
            transport_factory=transport_factory,
            on_connected=on_connected,
            on_close=on_close,
            on_error=on_error,
            sink=self._log,
            dev_mode=dev_mode,
        )
        self.registry = ActionRegistry(self.connection.send, sink=self._log)
        checked = self.registry if validate_actions else None
        self.dispatcher = ActionDispatcher(self.send_action_result, registry=checked, sink=self._log)
        self.forcer = ForceController(self.connection.send, registry=self.registry, sink=self._log)

        self.connection.route(IncomingCommand.ACTION, self.dispatcher.handle_message)
        self.connection.route(IncomingCommand.REREGISTER_ALL, self._handle_reregister_all)
        self.connection.route(IncomingCommand.GRACEFUL_SHUTDOWN, self._handle_graceful_shutdown)
        self.connection.route(IncomingCommand.IMMEDIATE_SHUTDOWN, self._handle_immediate_shutdown)

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> "NeuroClient":
        kwargs.setdefault("dev_mode", settings.dev_mode)
        kwargs.setdefault("validate_actions", settings.validate_actions)
        kwargs.setdefault("transport", settings.transport)
        return cls(settings.url, settings.game, **kwargs)

    @property
    def url(self) -> str:
        return self.connection.url

    @property
    def game(self) -> str:
        return self.connection.game

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def registered_actions(self) -> List[Action]:
        return list(self.registry)

    def connect(self) -> None:
        self.connection.connect()

    def disconnect(self) -> None:
        self.connection.disconnect()

    def reconnect(self, url: Optional[str] = None) -> None:
        """Reconnect, optionally to a new *url*. The registry is kept."""

        self.connection.reconnect(url)

    async def wait_closed(self) -> None:
        await self.connection.wait_closed()

    def on_action(self, handler: ActionHandler) -> ActionHandler:
        """Register an action handler. Usable as a decorator."""

        return self.dispatcher.on_action(handler)

    def send_context(self, message: str, silent: bool = False) -> None:
        """Tell Neuro about something happening in the game.

        A silent message is added to her context without prompting a reply.
        """

        data: ContextData = {"message": message, "silent": silent}
        self.connection.send(OutgoingCommand.CONTEXT, data)

    def register_actions(self, actions: Sequence[Union[Action, Mapping[str, Any]]]) -> None:
        self.registry.register([_as_action(action) for action in actions])

    def unregister_actions(self, action_names: Sequence[str]) -> None:
        self.registry.unregister(action_names)

    def force_actions(
        self,
        query: str,
        action_names: Sequence[str],
        state: Optional[str] = None,
        ephemeral_context: bool = False,
        priority: Union[ForcePriority, str] = ForcePriority.LOW,
    ) -> ForceActionsData:
        """Force Neuro to execute one of *action_names* as soon as possible."""

        return self.forcer.force(
            query,
            action_names,
            state=state,
            ephemeral_context=ephemeral_context,
            priority=priority,
        )

    def send_action_result(
        self, action_id: str, success: bool, message: Optional[str] = None
    ) -> None:
        """Report the outcome of action *action_id*; send it as soon as it is known.

        A failed result for an actions force makes Neuro retry the force.
        """

        if not success and not message:
            self._log("Empty message field even though success was false!", LogLevel.WARN)
        data: ActionResultData = {"id": action_id, "success": success, "message": message}
        self.connection.send(OutgoingCommand.ACTION_RESULT, data)

    def _log(self, message: str, level: LogLevel) -> None:
        self.log_sink(message, level)

    def _handle_reregister_all(self, _data: Optional[Dict[str, Any]]) -> None:
        self.registry.resync_all()

    def _handle_graceful_shutdown(self, data: Optional[Dict[str, Any]]) -> None:
        wants_shutdown = bool((data or {}).get("wants_shutdown", False))
        if self.on_graceful_shutdown is None:
            self._log(f"Ignoring graceful shutdown request (wants_shutdown={wants_shutdown})", LogLevel.INFO)
            return
        self.on_graceful_shutdown(wants_shutdown)

    def _handle_immediate_shutdown(self, _data: Optional[Dict[str, Any]]) -> None:
        if self.on_immediate_shutdown is None:
            self._log("Ignoring immediate shutdown request", LogLevel.INFO)
            return
        self.on_immediate_shutdown()


def _as_action(action: Union[Action, Mapping[str, Any]]) -> Action:
    if isinstance(action, Action):
        return action
    return Action.model_validate(action)
