from __future__ import annotations

"""Local record of the actions currently advertised to Neuro."""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..config import Action
from ..protocol.messages import OutgoingCommand, RegisterActionsData, UnregisterActionsData
from ..utils.logsink import LogLevel, LogSink, default_sink

SendCommand = Callable[[OutgoingCommand, Optional[Mapping[str, Any]]], None]


def _quoted(names: Iterable[str]) -> str:
    return '"' + '", "'.join(names) + '"'


class ActionRegistry:
    """Bookkeeping for registered actions.

    The server is the final arbiter of duplicate and unknown names, so the
    registry only warns about them and always forwards the full request.
    For a duplicated name the first registered entry is the one kept.
    """

    def __init__(self, send: SendCommand, *, sink: LogSink = default_sink) -> None:
        self._send = send
        self.sink = sink
        self._actions: Dict[str, Action] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(list(self._actions.values()))

    def get(self, name: str) -> Optional[Action]:
        return self._actions.get(name)

    def names(self) -> List[str]:
        return list(self._actions)

    def partition(self, names: Iterable[str]) -> Tuple[List[str], List[str]]:
        """Split *names* into registered and unregistered, keeping order."""

        known: List[str] = []
        unknown: List[str] = []
        for name in names:
            (known if name in self._actions else unknown).append(name)
        return known, unknown

    def register(self, actions: Sequence[Action]) -> None:
        duplicates: List[str] = []
        seen = set(self._actions)
        for action in actions:
            if action.name in seen:
                duplicates.append(action.name)
            seen.add(action.name)
        if duplicates:
            self.sink(
                f"Duplicate action registered: {_quoted(duplicates)}\n"
                "The Neuro server will ignore those registrations.",
                LogLevel.WARN,
            )
        for action in actions:
            self._actions.setdefault(action.name, action)
        self._send_register(actions)

    def unregister(self, names: Sequence[str]) -> None:
        unknown: List[str] = []
        for name in names:
            if self._actions.pop(name, None) is None:
                unknown.append(name)
        if unknown:
            self.sink(
                f"Actions not registered: {_quoted(unknown)}\n"
                "The Neuro server will ignore those unregistrations.",
                LogLevel.INFO,
            )
        data: UnregisterActionsData = {"action_names": list(names)}
        self._send(OutgoingCommand.UNREGISTER_ACTIONS, data)

    def resync_all(self) -> None:
        """Resend every registered action, as requested by ``actions/reregister_all``."""

        self.sink(f"Re-registering {len(self._actions)} action(s)", LogLevel.DEBUG)
        self._send_register(list(self._actions.values()))

    def _send_register(self, actions: Sequence[Action]) -> None:
        data: RegisterActionsData = {"actions": [action.to_wire() for action in actions]}
        self._send(OutgoingCommand.REGISTER_ACTIONS, data)
