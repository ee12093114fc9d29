"""Debug session - correlates operator commands with remote replies.

A Session pairs the single live connection with the prompt loop. At most
one command is in flight; the next inbound message is that command's reply.
Anything arriving while no command is pending is an unsolicited remote log.

State machine:
    IDLE --submit--> AWAITING_REPLY --message/timeout--> IDLE
    any  --close---> CLOSED
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

from vdebug.core.errors import CommandPendingError, ConnectionClosedError

if TYPE_CHECKING:
    from vdebug.transport.protocol import Connection

logger = logging.getLogger(__name__)

ReplyCallback = Callable[[str], None]


class SessionState(Enum):
    """Correlator state."""

    IDLE = auto()
    AWAITING_REPLY = auto()
    CLOSED = auto()


class SessionDisplay(Protocol):
    """Output the session needs for logs it classifies and errors it recovers."""

    def client_log(self, payload: str) -> None: ...

    def debugger_warning(self, message: str) -> None: ...

    def debugger_error(self, error: BaseException) -> None: ...


@dataclass
class Command:
    """An operator expression awaiting remote evaluation.

    Attributes:
        source: Raw text typed by the operator.
        wire: Encoded request sent to the peer.
        callback: Invoked once with the reply payload.
        issued_at: Monotonic submission time.
    """

    source: str
    wire: str
    callback: ReplyCallback
    issued_at: float = field(default_factory=time.monotonic)


@dataclass
class Session:
    """Stateful pairing of one connection with one prompt loop.

    Example:
        >>> session = Session(connection=conn, display=presenter)
        >>> await session.submit(Command("1+1", wire, show_reply))
        >>> await session.wait_idle()
    """

    connection: Connection
    display: SessionDisplay
    reply_timeout: float | None = None

    state: SessionState = field(default=SessionState.IDLE, init=False)
    # True while a prompt loop is attached and running
    prompt_active: bool = field(default=False, init=False)

    _pending: Command | None = field(default=None, init=False, repr=False)
    _idle: asyncio.Event = field(default_factory=asyncio.Event, init=False, repr=False)
    _timeout_handle: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._idle.set()

    @property
    def prompt_visible(self) -> bool:
        """Whether the input line is on screen and not waiting on a reply."""
        return self.prompt_active and self.state is SessionState.IDLE

    @property
    def pending(self) -> Command | None:
        return self._pending

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    async def submit(self, command: Command) -> None:
        """Send a command and wait for its reply in the background.

        Raises:
            ConnectionClosedError: If the session is closed or the send fails
                because the connection went away.
            CommandPendingError: If another command is still outstanding.
        """
        if self.state is SessionState.CLOSED:
            raise ConnectionClosedError("Session is closed")
        if self._pending is not None:
            raise CommandPendingError(
                f"Command {self._pending.source!r} is still awaiting its reply"
            )

        self._pending = command
        self.state = SessionState.AWAITING_REPLY
        self._idle.clear()
        logger.debug("Command submitted: %r", command.source)

        try:
            await self.connection.send(command.wire)
        except Exception:
            if self._pending is command:
                self._pending = None
                self._release()
            raise

        # The reply may already have arrived while the send was draining
        if self.reply_timeout is not None and self._pending is command:
            loop = asyncio.get_running_loop()
            self._timeout_handle = loop.call_later(self.reply_timeout, self._expire, command)

    async def send_raw(self, payload: str) -> None:
        """Send text outside the command path; any answer is shown as a log."""
        if self.state is SessionState.CLOSED:
            raise ConnectionClosedError("Session is closed")
        await self.connection.send(payload)

    def handle_message(self, payload: str) -> None:
        """Route one inbound message to the pending command or the log display."""
        if self.state is SessionState.CLOSED:
            logger.debug("Dropping message received after close")
            return

        command, self._pending = self._pending, None
        try:
            if command is not None:
                logger.debug(
                    "Reply for %r after %.3fs",
                    command.source,
                    time.monotonic() - command.issued_at,
                )
                command.callback(payload)
            else:
                self.display.client_log(payload)
        except Exception as e:
            logger.warning("Failed to handle inbound message", exc_info=True)
            self.display.debugger_error(e)
        finally:
            self._release()

    async def wait_idle(self) -> None:
        """Wait until no command is outstanding (reply, timeout or close)."""
        await self._idle.wait()

    def close(self) -> None:
        """Close the session, dropping any pending command without calling it."""
        if self.state is SessionState.CLOSED:
            return

        if self._pending is not None:
            logger.debug("Dropping pending command %r on close", self._pending.source)
        self._pending = None
        self._cancel_timeout()
        self.state = SessionState.CLOSED
        self._idle.set()

    def _expire(self, command: Command) -> None:
        self._timeout_handle = None
        if self._pending is not command:
            return
        self._pending = None
        logger.warning("No reply for %r within %ss", command.source, self.reply_timeout)
        self.display.debugger_warning(
            f"No reply within {self.reply_timeout:g}s, the prompt is available again"
        )
        self._release()

    def _release(self) -> None:
        self._cancel_timeout()
        if self.state is SessionState.AWAITING_REPLY:
            self.state = SessionState.IDLE
        self._idle.set()

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
