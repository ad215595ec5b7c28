from __future__ import annotations

"""Transport registry."""

from typing import Dict, Type

from .base import BaseTransport, TransportNotOpenError
from .websocket import WebSocketTransport

_TRANSPORTS: Dict[str, Type[BaseTransport]] = {
    WebSocketTransport.name: WebSocketTransport,
}


def get_transport(name: str) -> Type[BaseTransport]:
    try:
        return _TRANSPORTS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown transport '{name}'") from exc


def register_transport(transport_cls: Type[BaseTransport]) -> None:
    """Register a new transport class by its declared name."""

    if not getattr(transport_cls, "name", None):
        raise ValueError("Transport class must define a name")
    _TRANSPORTS[transport_cls.name] = transport_cls


def available_transports() -> Dict[str, Type[BaseTransport]]:
    """Return the currently registered transport mapping."""

    return dict(_TRANSPORTS)


__all__ = [
    "BaseTransport",
    "TransportNotOpenError",
    "WebSocketTransport",
    "available_transports",
    "get_transport",
    "register_transport",
]
