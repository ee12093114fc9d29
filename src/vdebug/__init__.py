"""vdebug - Remote debugging console for Vendetta.

Listens for a websocket connection from a Vendetta-modded Discord client
and gives the operator an interactive prompt whose input is evaluated in
the client. Results come back over the same socket; unsolicited console
output from the client is shown as it arrives.

Layers:
    core/       Session protocol, configuration, wire conventions
    transport/  WebSocket listener (aiohttp)
    frontends/  Interactive console (prompt_toolkit + rich) and CLI

Quick Start:
    >>> from vdebug import Debugger, DebuggerConfig
    >>>
    >>> debugger = Debugger(DebuggerConfig(port=9090))
    >>> await debugger.run()
"""

from vdebug.__version__ import __version__
from vdebug.core import (
    Command,
    DebuggerConfig,
    DebuggerError,
    Session,
    SessionState,
)
from vdebug.frontends.tui import Debugger, Presenter, PromptLoop
from vdebug.transport import WebSocketListener

__all__ = [
    "__version__",
    # Session
    "Command",
    "Session",
    "SessionState",
    # Application
    "Debugger",
    "DebuggerConfig",
    "Presenter",
    "PromptLoop",
    "WebSocketListener",
    # Errors
    "DebuggerError",
]
