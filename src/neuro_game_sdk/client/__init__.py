from .client import NeuroClient
from .connection import Connection, ConnectionState
from .dispatch import ActionDispatcher, ActionHandler, format_schema_failure, parse_params, schema_errors
from .force import ForceController
from .registry import ActionRegistry

__all__ = [
    "NeuroClient",
    "Connection",
    "ConnectionState",
    "ActionDispatcher",
    "ActionHandler",
    "format_schema_failure",
    "parse_params",
    "schema_errors",
    "ForceController",
    "ActionRegistry",
]
