"""Debugger error types.

Custom exceptions for configuration, transport and session failures.
"""

from __future__ import annotations


class DebuggerError(Exception):
    """Base error for debugger operations."""


class ConfigError(DebuggerError):
    """Invalid startup configuration.

    Raised when:
    - The silent level is not a number or is outside 0-2
    - The port is not a number or is outside 0-65535
    - The reply timeout is not a positive number
    - The on-connect file cannot be read
    """

    def __init__(self, message: str, errno: int | None = None) -> None:
        super().__init__(message)
        self.errno = errno


class BindError(DebuggerError):
    """The listener could not bind its port."""


class ConnectionClosedError(DebuggerError):
    """Send attempted on a connection or session that is already closed."""


class CommandPendingError(DebuggerError):
    """A command was submitted while another one is awaiting its reply."""


class EnvelopeError(DebuggerError):
    """An unsolicited payload is not a valid log envelope."""
