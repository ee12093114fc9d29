"""Startup configuration.

Defaults come from VDEBUG_* environment variables (optionally loaded from a
``.env`` file in the working directory); explicit command line values win.
Every value is validated here so that a bad option fails before the
listener starts.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from vdebug.core.errors import ConfigError
from vdebug.core.protocol import EVAL_MODES

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9090
DEFAULT_SILENT = 0
MAX_PORT = 65535


@dataclass
class DebuggerConfig:
    """Validated debugger configuration.

    Attributes:
        host: Interface the websocket listener binds to.
        port: Listener port (0 lets the OS pick one).
        silent: Verbosity, 0 (everything) to 2 (raw passthrough).
        on_connected_path: File whose contents are sent on connect.
        on_connected_payload: Contents of that file, read at startup.
        reply_timeout: Seconds to wait for a reply, None to wait forever.
        eval_mode: Wire encoding for operator input ("inspect" or "raw").
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    silent: int = DEFAULT_SILENT
    on_connected_path: str | None = None
    on_connected_payload: str | None = None
    reply_timeout: float | None = None
    eval_mode: str = "inspect"

    @classmethod
    def from_options(
        cls,
        *,
        port: str | int | None = None,
        silent: str | int | None = None,
        on_connected_path: str | None = None,
        reply_timeout: str | float | None = None,
        eval_mode: str = "inspect",
        host: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> DebuggerConfig:
        """Build a config from command line values and environment defaults.

        Args:
            port: Listener port, or None for the default.
            silent: Verbosity level, or None for the default.
            on_connected_path: Optional on-connect file path.
            reply_timeout: Optional reply timeout in seconds.
            eval_mode: Wire encoding name.
            host: Bind host, or None for the default.
            env: Environment mapping (defaults to os.environ after .env load).

        Raises:
            ConfigError: If any value is invalid or the file is unreadable.
        """
        if env is None:
            load_env_file()
            env = os.environ

        if port is None:
            port = env.get("VDEBUG_PORT", DEFAULT_PORT)
        if silent is None:
            silent = env.get("VDEBUG_SILENT", DEFAULT_SILENT)
        if on_connected_path is None:
            on_connected_path = env.get("VDEBUG_ON_CONNECTED_PATH")
        if host is None:
            host = env.get("VDEBUG_HOST", DEFAULT_HOST)

        if eval_mode not in EVAL_MODES:
            raise ConfigError(
                f'The option "eval-mode" should be one of: {", ".join(sorted(EVAL_MODES))}.'
            )

        # Checked in order: silent, port, timeout, then the file
        silent_level = parse_silent(silent)
        listen_port = parse_port(port)
        timeout = parse_timeout(reply_timeout)

        payload = None
        if on_connected_path:
            payload = read_on_connected(on_connected_path)
        else:
            on_connected_path = None

        return cls(
            host=host,
            port=listen_port,
            silent=silent_level,
            on_connected_path=on_connected_path,
            on_connected_payload=payload,
            reply_timeout=timeout,
            eval_mode=eval_mode,
        )


def load_env_file(path: Path | None = None) -> bool:
    """Load a .env file into the environment without overriding it.

    Returns:
        True if a file was found and loaded.
    """
    from dotenv import load_dotenv

    env_file = path or Path.cwd() / ".env"
    if not env_file.is_file():
        return False
    return load_dotenv(env_file, override=False)


def _parse_int(value: str | int, option: str) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(f'The option "{option}" should be a number.') from None


def parse_silent(value: str | int) -> int:
    """Parse and range-check the silent level (0-2)."""
    level = _parse_int(value, "silent")
    if not 0 <= level <= 2:
        raise ConfigError('The option "silent" should be in range 0-2.')
    return level


def parse_port(value: str | int) -> int:
    """Parse and range-check the listener port."""
    port = _parse_int(value, "port")
    if not 0 <= port <= MAX_PORT:
        raise ConfigError(f'The option "port" should be in range 0-{MAX_PORT}.')
    return port


def parse_timeout(value: str | float | None) -> float | None:
    """Parse the reply timeout; empty or zero disables it."""
    if value is None or value == "":
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError('The option "timeout" should be a number.') from None
    # call_later() fires nan at once and inf never
    if not math.isfinite(seconds):
        raise ConfigError('The option "timeout" should be a finite number.')
    if seconds < 0:
        raise ConfigError('The option "timeout" should not be negative.')
    return seconds or None


def read_on_connected(path: str) -> str:
    """Read the on-connect payload file.

    Raises:
        ConfigError: Carrying the underlying errno if the file is unreadable.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f'The path in "onConnectedPath" is not accessible: {e}',
            errno=getattr(e, "errno", None),
        ) from e
