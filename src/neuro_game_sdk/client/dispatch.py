from __future__ import annotations

"""Parsing, validation and handler fan-out for inbound ``action`` commands."""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from jsonschema import Draft7Validator

from ..protocol.codec import MalformedEnvelopeError, decode_action_request
from ..protocol.messages import ActionData, ActionRequest
from ..utils.logsink import LogLevel, LogSink, default_sink
from .registry import ActionRegistry

ActionHandler = Callable[[ActionData], None]
SendResult = Callable[[str, bool, Optional[str]], None]


class InvalidActionData(ValueError):
    """Raised when an action's ``data`` string is not a JSON object."""


def parse_params(data: Optional[str]) -> Dict[str, Any]:
    """Decode an action's JSON parameter string; absent or empty means ``{}``."""

    if not data:
        return {}
    try:
        params = json.loads(data)
    except ValueError as exc:
        raise InvalidActionData(str(exc)) from exc
    if not isinstance(params, dict):
        raise InvalidActionData(f"expected a JSON object, got {type(params).__name__}")
    return params


def schema_errors(schema: Mapping[str, Any], params: Mapping[str, Any]) -> List[str]:
    """Return one readable line per schema violation, empty when *params* pass."""

    validator = Draft7Validator(schema)
    lines: List[str] = []
    for error in sorted(validator.iter_errors(params), key=lambda err: err.json_path):
        path = error.json_path
        if path.startswith("$."):
            lines.append(f"{path[2:]}: {error.message}")
        elif path == "$":
            lines.append(error.message)
        else:
            lines.append(f"{path[1:]}: {error.message}")
    return lines


def format_schema_failure(name: str, errors: List[str]) -> str:
    failures = "\n".join(f"- {line}" for line in errors or ["Unknown schema validation error."])
    return (
        f'Your inputs for the action "{name}" did not pass schema validation.\n\n'
        f"{failures}\n\n"
        "Please pay attention to the schema and the above errors if you choose to retry."
    )


class ActionDispatcher:
    """Turns ``action`` commands into handler calls.

    With a registry the dispatcher answers unknown actions and schema
    failures itself; without one every well-formed request goes straight to
    the handlers. Results for dispatched requests are the handlers' job.
    """

    def __init__(
        self,
        send_result: SendResult,
        *,
        registry: Optional[ActionRegistry] = None,
        sink: LogSink = default_sink,
    ) -> None:
        self._send_result = send_result
        self.registry = registry
        self.sink = sink
        self._handlers: List[ActionHandler] = []

    @property
    def handlers(self) -> List[ActionHandler]:
        return list(self._handlers)

    def on_action(self, handler: ActionHandler) -> ActionHandler:
        """Add *handler*; handlers run in the order they were added."""

        self._handlers.append(handler)
        return handler

    def handle_message(self, data: Optional[Mapping[str, Any]]) -> None:
        try:
            request = decode_action_request(data)
        except MalformedEnvelopeError as exc:
            self.sink(str(exc), LogLevel.ERROR)
            return
        self.dispatch(request)

    def dispatch(self, request: ActionRequest) -> None:
        try:
            params = parse_params(request.data)
        except InvalidActionData as exc:
            message = f"Invalid action data: {exc}"
            self.sink(message, LogLevel.ERROR)
            self._send_result(request.id, False, message)
            return

        if self.registry is not None:
            action = self.registry.get(request.name)
            if action is None:
                self._send_result(request.id, True, f'Unknown action: "{request.name}"')
                return
            if action.has_schema:
                errors = schema_errors(action.schema_ or {}, params)
                if errors:
                    self.sink(
                        f'Action "{request.name}" failed schema validation', LogLevel.DEBUG
                    )
                    self._send_result(
                        request.id, False, format_schema_failure(request.name, errors)
                    )
                    return

        if not self._handlers:
            self.sink("No action handlers registered.", LogLevel.ERROR)
            return
        invocation = ActionData(id=request.id, name=request.name, params=params)
        for handler in list(self._handlers):
            try:
                handler(invocation)
            except Exception as exc:
                self.sink(
                    f'Action handler {getattr(handler, "__name__", handler)!s} failed '
                    f'for "{request.name}" ({request.id}): {exc!r}',
                    LogLevel.ERROR,
                )
