from __future__ import annotations

"""Envelope (de)serialization between typed messages and text frames."""

import json
from typing import Any, Mapping, Optional

from ..utils.jsonio import dumps_frame
from .messages import ActionRequest, IncomingMessage, OutgoingMessage


class MalformedEnvelopeError(ValueError):
    """Raised when an inbound frame is not a well-formed envelope."""


def prune_none(data: Mapping[str, Any]) -> dict:
    """Drop top-level keys whose value is ``None``."""

    return {key: value for key, value in data.items() if value is not None}


def build_message(
    command: str, game: str, data: Optional[Mapping[str, Any]] = None
) -> OutgoingMessage:
    message: OutgoingMessage = {"command": command, "game": game}
    if data is not None:
        message["data"] = prune_none(data)
    return message


def encode_message(
    command: str, game: str, data: Optional[Mapping[str, Any]] = None
) -> str:
    """Encode one outgoing command as a single text frame."""

    return dumps_frame(build_message(command, game, data))


def decode_message(text: str) -> IncomingMessage:
    """Decode an inbound frame.

    Unknown command names decode successfully; routing decides what to do
    with them. Anything that is not a JSON object carrying a string
    ``command`` raises :class:`MalformedEnvelopeError`.
    """

    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise MalformedEnvelopeError(f"Invalid JSON received: {text!r}") from exc
    if not isinstance(payload, dict):
        raise MalformedEnvelopeError(f"Envelope must be a JSON object: {text!r}")
    command = payload.get("command")
    if not isinstance(command, str):
        raise MalformedEnvelopeError(f"Envelope has no command: {text!r}")
    data = payload.get("data")
    if data is not None and not isinstance(data, dict):
        raise MalformedEnvelopeError(
            f"Data for command '{command}' must be a JSON object"
        )
    return IncomingMessage(command=command, data=data)


def decode_action_request(data: Optional[Mapping[str, Any]]) -> ActionRequest:
    """Read the ``action`` command payload into an :class:`ActionRequest`."""

    data = data or {}
    action_id = data.get("id")
    name = data.get("name")
    if not isinstance(action_id, str) or not isinstance(name, str):
        raise MalformedEnvelopeError("Action message requires string 'id' and 'name'")
    params = data.get("data")
    if params is not None and not isinstance(params, str):
        raise MalformedEnvelopeError(f"Action '{name}' data must be a JSON string")
    return ActionRequest(id=action_id, name=name, data=params)
