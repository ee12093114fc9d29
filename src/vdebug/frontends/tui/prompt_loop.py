"""Interactive prompt loop for one debug session.

Reads operator input with prompt_toolkit and forwards each non-empty line
to the session as a command. After a send the loop does not read again
until the session is idle, so at most one command is ever outstanding.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from vdebug.core.protocol import EvalEncoder, InspectEvalEncoder
from vdebug.core.session import Command, Session
from vdebug.frontends.tui.presenter import Presenter

logger = logging.getLogger(__name__)


class LoopExit(Enum):
    """Why a prompt loop ended."""

    EOF = auto()  # Ctrl-D
    INTERRUPT = auto()  # Ctrl-C, stop the whole debugger
    CLOSED = auto()  # connection closed or close() called


@dataclass
class PromptLoop:
    """Read-eval loop bound to a Session.

    Example:
        >>> loop = PromptLoop(session=session, presenter=presenter)
        >>> reason = await loop.run()
    """

    session: Session
    presenter: Presenter
    encoder: EvalEncoder = field(default_factory=InspectEvalEncoder)
    prompt: str = "> "
    # patch_stdout keeps background prints above the input line
    patch_output: bool = True
    prompt_session: PromptSession[str] = field(default=None)  # type: ignore[assignment]

    _closed: bool = field(default=False, init=False)
    _input_task: asyncio.Future[str | BaseException] | None = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.prompt_session is None:
            self.prompt_session = PromptSession(history=InMemoryHistory())

    @property
    def closed(self) -> bool:
        return self._closed

    async def run(self) -> LoopExit:
        """Run until end of input, interrupt, or close."""
        self.session.prompt_active = True
        try:
            if self.patch_output:
                with patch_stdout(raw=True):
                    reason = await self._loop()
            else:
                reason = await self._loop()
        finally:
            self.session.prompt_active = False
            self._closed = True

        logger.debug("Prompt loop ended: %s", reason.name)
        self.presenter.notice("Closing debugger, press Ctrl+C to exit")
        return reason

    def close(self) -> None:
        """Stop the loop, abandoning a pending input read."""
        self._closed = True
        if self._input_task is not None and not self._input_task.done():
            self._input_task.cancel()

    async def evaluate(self, line: str) -> None:
        """Send one line for remote evaluation and wait until it is answered."""
        if not line.strip():
            return

        command = Command(source=line, wire=self.encoder.encode(line), callback=self.show_result)
        try:
            await self.session.submit(command)
        except Exception as e:
            logger.warning("Failed to submit %r", line, exc_info=True)
            self.show_result(e)
            return

        await self.session.wait_idle()

    def show_result(self, payload: str | BaseException) -> None:
        """Completion callback: errors get the debugger style, replies print as-is."""
        if isinstance(payload, BaseException):
            self.presenter.debugger_error(payload)
        else:
            self.presenter.reply(payload)

    async def _loop(self) -> LoopExit:
        while not self._closed and not self.session.closed:
            try:
                line = await self._read_line()
            except EOFError:
                return LoopExit.EOF
            except KeyboardInterrupt:
                return LoopExit.INTERRUPT
            except asyncio.CancelledError:
                # close() cancels the read; anything else is a real cancellation
                if self._closed:
                    return LoopExit.CLOSED
                raise

            await self.evaluate(line)

        return LoopExit.CLOSED

    async def _read_line(self) -> str:
        self._input_task = asyncio.ensure_future(self._prompt_once())
        try:
            result = await self._input_task
        finally:
            self._input_task = None

        if isinstance(result, BaseException):
            raise result
        return result

    async def _prompt_once(self) -> str | BaseException:
        # KeyboardInterrupt must not escape a task, it would stop the event loop
        try:
            return await self.prompt_session.prompt_async(self.prompt)
        except (EOFError, KeyboardInterrupt) as e:
            return e
