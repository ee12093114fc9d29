"""WebSocket transport - listener for the remote client.

The remote application connects out to the debugger, so the debugger is
the server side: an aiohttp application that upgrades any path to a
websocket and keeps exactly one connection as the active one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from aiohttp import WSCloseCode, WSMsgType, web

from vdebug.core.errors import BindError, ConnectionClosedError
from vdebug.transport.protocol import (
    ClosedHandler,
    ConnectedHandler,
    MessageHandler,
    ReadyHandler,
)

logger = logging.getLogger(__name__)

# 16MB limit for large inspect() dumps
MAX_MESSAGE_SIZE = 16 * 1024 * 1024


@dataclass
class WebSocketConnection:
    """One accepted websocket, exposed as a Connection.

    Handlers are assigned by whoever owns the session after the
    ``on_connected`` hook has run.
    """

    _ws: web.WebSocketResponse
    peer: str = "unknown"
    on_message: MessageHandler | None = None
    on_closed: ClosedHandler | None = None
    _closed: bool = field(default=False, init=False)

    @property
    def closed(self) -> bool:
        return self._closed or self._ws.closed

    async def send(self, payload: str) -> None:
        """Send a text frame.

        Raises:
            ConnectionClosedError: If the socket is closed or closing.
        """
        if self.closed:
            raise ConnectionClosedError(f"Connection to {self.peer} is closed")
        try:
            await self._ws.send_str(payload)
        except ConnectionResetError as e:
            raise ConnectionClosedError(f"Connection to {self.peer} was reset") from e

    async def close(self, code: int = WSCloseCode.OK, message: bytes = b"") -> None:
        await self._ws.close(code=code, message=message)

    def _dispatch(self, payload: str) -> None:
        if self.on_message is not None:
            self.on_message(payload)

    def _mark_closed(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.on_closed is not None:
            self.on_closed()


@dataclass
class WebSocketListener:
    """Websocket server accepting a single active connection.

    A connection attempt while another one is open is rejected with close
    code 1013 (try again later); the active session is left untouched.

    Example:
        >>> listener = WebSocketListener(port=9090, on_connected=handle)
        >>> port = await listener.start()
        >>> ...
        >>> await listener.stop()
    """

    host: str = "0.0.0.0"
    port: int = 9090
    on_connected: ConnectedHandler | None = None
    on_ready: ReadyHandler | None = None
    _app: web.Application | None = field(default=None, init=False)
    _runner: web.AppRunner | None = field(default=None, init=False)
    _current: WebSocketConnection | None = field(default=None, init=False)

    @property
    def current(self) -> WebSocketConnection | None:
        """The active connection, if any."""
        return self._current

    async def start(self) -> int:
        """Bind the port and start accepting connections.

        Returns:
            The effective port (useful when binding port 0).

        Raises:
            BindError: If the port cannot be bound.
        """
        self._app = web.Application()
        self._app.router.add_get("/{tail:.*}", self._handle_websocket)

        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.host, self.port)
        try:
            await site.start()
        except OSError as e:
            await self._runner.cleanup()
            self._runner = None
            raise BindError(f"Could not listen on {self.host}:{self.port}: {e}") from e

        port = self._runner.addresses[0][1]
        logger.info("WebSocket listener started on %s:%s", self.host, port)

        if self.on_ready is not None:
            self.on_ready(port)
        return port

    async def stop(self) -> None:
        """Close the active connection and stop listening."""
        if self._current is not None and not self._current.closed:
            await self._current.close(code=WSCloseCode.GOING_AWAY)

        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

        logger.info("WebSocket listener stopped")

    async def _handle_websocket(self, request: web.Request) -> web.StreamResponse:
        ws = web.WebSocketResponse(max_msg_size=MAX_MESSAGE_SIZE)
        if not ws.can_prepare(request).ok:
            return web.Response(status=400, text="Expected a websocket upgrade")
        await ws.prepare(request)

        peer = request.remote or "unknown"
        if self._current is not None and not self._current.closed:
            logger.warning("Rejecting connection from %s: a session is already active", peer)
            await ws.close(
                code=WSCloseCode.TRY_AGAIN_LATER,
                message=b"debug session already active",
            )
            return ws

        connection = WebSocketConnection(ws, peer=peer)
        self._current = connection
        logger.debug("WebSocket client connected: %s", peer)

        try:
            if self.on_connected is not None:
                await self.on_connected(connection)

            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    connection._dispatch(msg.data)
                elif msg.type == WSMsgType.BINARY:
                    connection._dispatch(msg.data.decode("utf-8", errors="replace"))
                elif msg.type == WSMsgType.ERROR:
                    logger.warning("WebSocket error from %s: %s", peer, ws.exception())
        except (ConnectionResetError, ConnectionClosedError):
            logger.debug("WebSocket connection reset: %s", peer)
        finally:
            if self._current is connection:
                self._current = None
            connection._mark_closed()
            logger.debug("WebSocket client disconnected: %s", peer)

        return ws
