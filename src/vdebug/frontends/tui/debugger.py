"""Debugger application - wires the listener, session and prompt together.

One Session and one PromptLoop exist per accepted connection. When the
connection closes both are torn down and the listener waits for the next
client; the process itself keeps running until the operator interrupts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from prompt_toolkit import PromptSession

from vdebug.core.config import DebuggerConfig
from vdebug.core.protocol import get_encoder
from vdebug.core.session import Session
from vdebug.frontends.tui.presenter import Presenter
from vdebug.frontends.tui.prompt_loop import LoopExit, PromptLoop
from vdebug.transport.protocol import Connection
from vdebug.transport.websocket import WebSocketListener

logger = logging.getLogger(__name__)


@dataclass
class Debugger:
    """Remote debugging console.

    Example:
        >>> debugger = Debugger(DebuggerConfig(port=9090))
        >>> await debugger.run()
    """

    config: DebuggerConfig
    presenter: Presenter = field(default=None)  # type: ignore[assignment]
    # Set False when stdout must not be patched (tests, non-tty use)
    patch_output: bool = True
    prompt_session_factory: Callable[[], PromptSession[str]] | None = None

    listener: WebSocketListener = field(init=False)
    port: int | None = field(default=None, init=False)
    interrupted: bool = field(default=False, init=False)
    session: Session | None = field(default=None, init=False)
    _prompt_loop: PromptLoop | None = field(default=None, init=False)
    _prompt_task: asyncio.Task[LoopExit] | None = field(default=None, init=False)
    _stopped: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    def __post_init__(self) -> None:
        if self.presenter is None:
            self.presenter = Presenter(silent=self.config.silent)
        self.listener = WebSocketListener(
            host=self.config.host,
            port=self.config.port,
            on_connected=self._on_connected,
            on_ready=self._on_ready,
        )

    async def run(self) -> bool:
        """Listen and serve sessions until stop() is called.

        Returns:
            True if the operator interrupted the prompt (Ctrl-C).

        Raises:
            BindError: If the listener cannot bind its port.
        """
        self.presenter.welcome()
        if self.config.on_connected_path and not self.config.on_connected_payload:
            self.presenter.debugger_warning('The file in "onConnectedPath" is empty')

        await self.listener.start()
        try:
            await self._stopped.wait()
        finally:
            await self.shutdown()
        return self.interrupted

    def stop(self) -> None:
        """Request shutdown; run() returns once cleanup is done."""
        self._stopped.set()

    async def shutdown(self) -> None:
        if self._prompt_loop is not None:
            self._prompt_loop.close()
        await self.listener.stop()

        task = self._prompt_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.gather(task, return_exceptions=True)

    def _on_ready(self, port: int) -> None:
        self.port = port
        self.presenter.notice(f"Listening for connections on port {port}")

    async def _on_connected(self, connection: Connection) -> None:
        self.presenter.notice("Connected to Discord over websocket, starting debug session")
        logger.info("Debug session started with %s", connection.peer)

        session = Session(
            connection=connection,
            display=self.presenter,
            reply_timeout=self.config.reply_timeout,
        )
        connection.on_message = session.handle_message
        connection.on_closed = self._on_closed
        self.session = session
        self.presenter.bind_prompt(lambda: session.prompt_visible)

        # Must reach the client before any operator command
        if self.config.on_connected_payload:
            await session.send_raw(self.config.on_connected_payload)

        self._prompt_loop = PromptLoop(
            session=session,
            presenter=self.presenter,
            encoder=get_encoder(self.config.eval_mode),
            patch_output=self.patch_output,
            prompt_session=self.prompt_session_factory() if self.prompt_session_factory else None,
        )
        self._prompt_task = asyncio.create_task(self._run_prompt(self._prompt_loop))

    async def _run_prompt(self, loop: PromptLoop) -> LoopExit:
        reason = await loop.run()
        if reason is LoopExit.INTERRUPT:
            self.interrupted = True
            self.stop()
        return reason

    def _on_closed(self) -> None:
        self.presenter.notice("Websocket has been closed")
        logger.info("Debug session ended")

        if self.session is not None:
            self.session.close()
        if self._prompt_loop is not None:
            self._prompt_loop.close()
        self.presenter.bind_prompt(None)
        self.session = None
