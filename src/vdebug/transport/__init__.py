"""Transport - connection to the remote client.

Available transports:
    WebSocketListener: aiohttp websocket server, one active connection.

Example:
    >>> from vdebug.transport import WebSocketListener
    >>>
    >>> listener = WebSocketListener(port=9090, on_connected=handle)
    >>> port = await listener.start()
"""

from vdebug.transport.protocol import Connection, Listener
from vdebug.transport.websocket import WebSocketConnection, WebSocketListener

__all__ = [
    # Protocols
    "Connection",
    "Listener",
    # Implementations
    "WebSocketConnection",
    "WebSocketListener",
]
