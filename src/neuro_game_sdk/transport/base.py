from __future__ import annotations

"""Transport base class."""

from typing import Callable, Optional


class TransportNotOpenError(RuntimeError):
    """Raised when a frame is sent over a transport that is not open."""


def _ignore(*_args: object) -> None:
    return None


class BaseTransport:
    """Message-oriented channel delivering complete text frames in order.

    Owners subscribe by assigning the ``on_open``, ``on_message``,
    ``on_close`` and ``on_error`` attributes before calling :meth:`open`.
    """

    name: str = "base"

    def __init__(self) -> None:
        self.on_open: Callable[[], None] = _ignore
        self.on_message: Callable[[str], None] = _ignore
        self.on_close: Callable[[Optional[int], str], None] = _ignore
        self.on_error: Callable[[BaseException], None] = _ignore

    @property
    def is_open(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def open(self, url: str) -> None:  # pragma: no cover - interface
        """Start connecting to *url*; ``on_open`` fires once established."""

        raise NotImplementedError

    def send(self, text: str) -> None:  # pragma: no cover - interface
        """Send one text frame or raise :class:`TransportNotOpenError`."""

        raise NotImplementedError

    def close(self) -> None:  # pragma: no cover - interface
        """Close the channel. Closing twice is a no-op."""

        raise NotImplementedError

    async def wait_closed(self) -> None:
        return None
