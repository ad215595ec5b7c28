from __future__ import annotations

"""Composition of ``actions/force`` commands."""

from typing import Optional, Sequence, Union

from ..protocol.messages import ForceActionsData, ForcePriority, OutgoingCommand
from ..utils.logsink import LogLevel, LogSink, default_sink
from .registry import ActionRegistry, SendCommand


class ForceController:
    """Asks Neuro to pick one of a set of actions right away.

    The requested names are checked against the registry when one is given,
    but the command is always sent with the original, unfiltered list.
    """

    def __init__(
        self,
        send: SendCommand,
        *,
        registry: Optional[ActionRegistry] = None,
        sink: LogSink = default_sink,
    ) -> None:
        self._send = send
        self.registry = registry
        self.sink = sink

    def force(
        self,
        query: str,
        action_names: Sequence[str],
        state: Optional[str] = None,
        ephemeral_context: bool = False,
        priority: Union[ForcePriority, str] = ForcePriority.LOW,
    ) -> ForceActionsData:
        priority = ForcePriority(priority)
        names = list(action_names)
        if self.registry is not None:
            known, unknown = self.registry.partition(names)
            if not known:
                self.sink(
                    "Force will be dropped, all actions unknown: " + ", ".join(names),
                    LogLevel.ERROR,
                )
            elif unknown:
                self.sink(
                    "Forcing unregistered actions: " + ", ".join(unknown),
                    LogLevel.WARN,
                )
        data: ForceActionsData = {
            "state": state,
            "query": query,
            "ephemeral_context": ephemeral_context,
            "priority": priority.value,
            "action_names": names,
        }
        self._send(OutgoingCommand.FORCE_ACTIONS, data)
        return data
