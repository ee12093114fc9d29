"""Core - session protocol, configuration and wire conventions.

Nothing in this package touches the terminal or the network directly:
the session talks to a Connection and a SessionDisplay supplied by the
transport and frontend layers.
"""

from vdebug.core.config import DebuggerConfig
from vdebug.core.errors import (
    BindError,
    CommandPendingError,
    ConfigError,
    ConnectionClosedError,
    DebuggerError,
    EnvelopeError,
)
from vdebug.core.protocol import (
    EvalEncoder,
    InspectEvalEncoder,
    LogEnvelope,
    LogLevel,
    RawEvalEncoder,
    get_encoder,
)
from vdebug.core.session import Command, Session, SessionState

__all__ = [
    # Session
    "Command",
    "Session",
    "SessionState",
    # Protocol
    "EvalEncoder",
    "InspectEvalEncoder",
    "RawEvalEncoder",
    "LogEnvelope",
    "LogLevel",
    "get_encoder",
    # Config
    "DebuggerConfig",
    # Errors
    "DebuggerError",
    "ConfigError",
    "BindError",
    "ConnectionClosedError",
    "CommandPendingError",
    "EnvelopeError",
]
