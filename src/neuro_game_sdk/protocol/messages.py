from __future__ import annotations

"""Typed payloads for game <-> Neuro websocket commands."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, TypedDict


class OutgoingCommand(str, Enum):
    STARTUP = "startup"
    CONTEXT = "context"
    REGISTER_ACTIONS = "actions/register"
    UNREGISTER_ACTIONS = "actions/unregister"
    FORCE_ACTIONS = "actions/force"
    ACTION_RESULT = "action/result"


class IncomingCommand(str, Enum):
    ACTION = "action"
    REREGISTER_ALL = "actions/reregister_all"
    GRACEFUL_SHUTDOWN = "shutdown/graceful"
    IMMEDIATE_SHUTDOWN = "shutdown/immediate"


class ForcePriority(str, Enum):
    """Interruption strength of an actions force, weakest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class OutgoingMessage(TypedDict, total=False):
    command: str
    game: str
    data: Dict[str, Any]


class ContextData(TypedDict):
    message: str
    silent: bool


class RegisterActionsData(TypedDict):
    actions: List[Dict[str, Any]]


class UnregisterActionsData(TypedDict):
    action_names: List[str]


class ForceActionsData(TypedDict, total=False):
    query: str
    action_names: List[str]
    state: Optional[str]
    ephemeral_context: bool
    priority: str


class ActionResultData(TypedDict, total=False):
    id: str
    success: bool
    message: Optional[str]


@dataclass(frozen=True)
class IncomingMessage:
    """A decoded inbound envelope; ``command`` may be outside the known set."""

    command: str
    data: Optional[Dict[str, Any]] = None

    @property
    def known_command(self) -> Optional[IncomingCommand]:
        try:
            return IncomingCommand(self.command)
        except ValueError:
            return None


@dataclass(frozen=True)
class ActionRequest:
    """An ``action`` command as sent by Neuro, before parameter parsing."""

    id: str
    name: str
    data: Optional[str] = None


@dataclass(frozen=True)
class ActionData:
    """Parsed action invocation handed to action handlers."""

    id: str
    name: str
    params: Mapping[str, Any] = field(default_factory=dict)
