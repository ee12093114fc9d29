"""Transport protocol definitions.

Defines the interfaces the session and the application rely on, so the
websocket implementation can be swapped for another message transport.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

MessageHandler = Callable[[str], None]
ClosedHandler = Callable[[], None]
ConnectedHandler = Callable[["Connection"], Awaitable[None]]
ReadyHandler = Callable[[int], None]


class Connection(Protocol):
    """One live bidirectional message channel to the remote peer."""

    peer: str
    on_message: MessageHandler | None
    on_closed: ClosedHandler | None

    @property
    def closed(self) -> bool: ...

    async def send(self, payload: str) -> None:
        """Send a text payload.

        Raises:
            ConnectionClosedError: If the connection is already closed.
        """
        ...

    async def close(self) -> None:
        """Close the connection."""
        ...


class Listener(Protocol):
    """Accepts at most one active Connection at a time."""

    async def start(self) -> int:
        """Bind and start accepting. Returns the effective port.

        Raises:
            BindError: If the port is unavailable.
        """
        ...

    async def stop(self) -> None:
        """Close the current connection and stop listening."""
        ...
