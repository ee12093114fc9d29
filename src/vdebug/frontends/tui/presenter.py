"""Presentation layer for the debugger console.

Formats remote logs, command replies and debugger notices, and writes them
without merging into a half-typed input line: while the prompt is visible
every line is preceded by a newline.

Verbosity (``silent``):
    0  everything, including the welcome banner
    1  no banner
    2  raw passthrough of remote logs, no lifecycle notices
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from rich.console import Console
from rich.text import Text

from vdebug.core.errors import EnvelopeError
from vdebug.core.protocol import LogEnvelope, LogLevel
from vdebug.frontends.tui.themes import DEFAULT_THEME

CLIENT_SOURCE = "Vendetta"
DEBUGGER_SOURCE = "Debugger"

LEVEL_STYLES = {
    LogLevel.INFO: "client.info",
    LogLevel.WARNING: "client.warning",
    LogLevel.ERROR: "client.error",
}

WELCOME = (
    "Welcome to the unofficial Vendetta debugger.\n"
    "Press Ctrl+C to exit.\n"
    "How to connect to the debugger: "
    "https://github.com/Meqativ/vendetta-debug/blob/master/README.md#connecting"
)


def tag(text: str | Text, source: str, style: str) -> Text:
    """Prefix ``text`` with ``[source] `` rendered in ``style``."""
    return Text.assemble((f"[{source}] ", style), text)


def format_client(payload: str) -> Text:
    """Render a remote log envelope, coloured by its level.

    Raises:
        EnvelopeError: If the payload is not a log envelope.
    """
    envelope = LogEnvelope.parse(payload)
    # Other levels are plain console.log output and stay uncoloured
    message = Text(envelope.message, style=LEVEL_STYLES.get(envelope.log_level, ""))
    return tag(message, CLIENT_SOURCE, "client.info")


def format_debugger(message: str, style: str = "debugger.info") -> Text:
    return tag(message, DEBUGGER_SOURCE, style)


def format_error(error: BaseException) -> str:
    detail = str(error)
    return f"{type(error).__name__}: {detail}" if detail else type(error).__name__


@dataclass
class Presenter:
    """Writes everything the operator sees.

    The presenter only reads prompt visibility; the session owns it and is
    bound with ``bind_prompt`` once a connection exists.

    Example:
        >>> presenter = Presenter(silent=0)
        >>> presenter.bind_prompt(lambda: session.prompt_visible)
        >>> presenter.client_log('{"message": "hello", "level": 0}')
    """

    silent: int = 0
    console: Console = field(default=None)  # type: ignore[assignment]
    err_console: Console = field(default=None)  # type: ignore[assignment]
    _prompt_visible: Callable[[], bool] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        # force_terminal=True keeps ANSI codes when stdout is patched by prompt_toolkit
        if self.console is None:
            self.console = Console(theme=DEFAULT_THEME, force_terminal=True, highlight=False)
        if self.err_console is None:
            self.err_console = Console(
                theme=DEFAULT_THEME, force_terminal=True, highlight=False, stderr=True
            )

    def bind_prompt(self, visible: Callable[[], bool] | None) -> None:
        """Set (or clear) the source of prompt visibility."""
        self._prompt_visible = visible

    @property
    def prompt_visible(self) -> bool:
        return self._prompt_visible is not None and self._prompt_visible()

    # =========================================================================
    # Output primitives
    # =========================================================================

    def log_line(self, line: Text) -> None:
        """Print a line, stepping off the input line first if it is shown."""
        if self.prompt_visible:
            self.console.line()
        self.console.print(line, soft_wrap=True)

    def log_raw(self, data: str) -> None:
        """Write text untouched (no markup, no colour, no envelope parsing)."""
        prefix = "\n" if self.prompt_visible else ""
        file = self.console.file
        file.write(f"{prefix}{data}\n")
        file.flush()

    # =========================================================================
    # Remote output
    # =========================================================================

    def client_log(self, payload: str) -> None:
        """Display an unsolicited message from the remote client."""
        if self.silent >= 2:
            self.log_raw(payload)
        else:
            self.log_line(format_client(payload))

    def reply(self, payload: str) -> None:
        """Display a command reply.

        The client usually answers with the log envelope of its console.log
        call; anything else is pre-formatted text whose colours are kept.
        """
        try:
            line = format_client(payload)
        except EnvelopeError:
            line = Text.from_ansi(payload)
        self.log_line(line)

    # =========================================================================
    # Debugger output
    # =========================================================================

    def debugger_log(self, message: str) -> None:
        if self.silent >= 2:
            self.log_raw(message)
        else:
            self.log_line(format_debugger(message))

    def debugger_warning(self, message: str) -> None:
        self.log_line(format_debugger(message, "debugger.warning"))

    def debugger_error(self, error: BaseException) -> None:
        self.log_line(format_debugger("Error", "debugger.error"))
        self.err_console.print(Text(format_error(error)), soft_wrap=True)

    def notice(self, message: str) -> None:
        """Lifecycle notice (listening, connected, closed); hidden at silent 2."""
        if self.silent < 2:
            self.debugger_log(message)

    def welcome(self) -> None:
        if self.silent == 0:
            self.console.print(Text(WELCOME), soft_wrap=True)
