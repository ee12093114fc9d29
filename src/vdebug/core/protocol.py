"""Wire conventions shared with the remote peer.

Outbound: operator input is wrapped by an EvalEncoder before it is sent.
Inbound: unsolicited messages are JSON log envelopes
``{"message": str, "level": int}``; replies to commands are opaque text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

from vdebug.core.errors import EnvelopeError


class LogLevel(IntEnum):
    """Levels used by the remote console in log envelopes."""

    INFO = 0
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEnvelope:
    """An unsolicited log line from the remote peer."""

    message: str
    level: int | None = None

    @property
    def log_level(self) -> LogLevel | None:
        """Known level, or None for levels without dedicated styling."""
        if self.level is None:
            return None
        try:
            return LogLevel(self.level)
        except ValueError:
            return None

    @classmethod
    def parse(cls, payload: str) -> LogEnvelope:
        """Parse a raw payload into an envelope.

        Raises:
            EnvelopeError: If the payload is not a JSON object with a message.
        """
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            raise EnvelopeError(f"Log payload is not valid JSON: {e}") from e

        if not isinstance(data, dict) or "message" not in data:
            raise EnvelopeError("Log payload has no message field")

        message = data["message"]
        if not isinstance(message, str):
            message = json.dumps(message) if message is not None else "null"

        level = data.get("level")
        if isinstance(level, bool) or not isinstance(level, int):
            level = None

        return cls(message=message, level=level)


class EvalEncoder(Protocol):
    """Turns operator input into the text sent to the remote peer."""

    name: str

    def encode(self, source: str) -> str: ...


class InspectEvalEncoder:
    """Evaluate remotely, print the inspected result there, return the value.

    The request runs the input through indirect eval (global scope), formats
    the result with the client's ``inspect`` module, logs it on the remote
    side unless it is ``undefined``, and leaves the raw value as the
    completion value.
    """

    name = "inspect"

    def encode(self, source: str) -> str:
        literal = json.dumps(source, ensure_ascii=False)
        return (
            f"const res=(0, eval)({literal});"
            'let out=vendetta.metro.findByProps("inspect").inspect(res,{showHidden:true});'
            'if(out!=="undefined")console.log(out);'
            "res"
        )


class RawEvalEncoder:
    """Send operator input untouched."""

    name = "raw"

    def encode(self, source: str) -> str:
        return source


EVAL_MODES: dict[str, type[InspectEvalEncoder] | type[RawEvalEncoder]] = {
    InspectEvalEncoder.name: InspectEvalEncoder,
    RawEvalEncoder.name: RawEvalEncoder,
}


def get_encoder(mode: str) -> EvalEncoder:
    """Return the encoder registered under ``mode``.

    Raises:
        KeyError: If no encoder has that name.
    """
    return EVAL_MODES[mode]()
