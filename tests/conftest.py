"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from io import StringIO
from typing import Any

import pytest
from rich.console import Console

from vdebug.core.errors import ConnectionClosedError
from vdebug.frontends.tui.presenter import Presenter
from vdebug.frontends.tui.themes import DEFAULT_THEME


class FakeConnection:
    """In-memory Connection that records what is sent."""

    def __init__(self) -> None:
        self.peer = "127.0.0.1"
        self.sent: list[str] = []
        self.on_message: Callable[[str], None] | None = None
        self.on_closed: Callable[[], None] | None = None
        self.fail_with: Exception | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, payload: str) -> None:
        if self._closed:
            raise ConnectionClosedError("Connection is closed")
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(payload)

    async def close(self) -> None:
        self._closed = True
        if self.on_closed is not None:
            self.on_closed()


class FakePromptSession:
    """Stands in for prompt_toolkit's PromptSession.

    Each prompt_async call pops the next scripted item: strings are returned
    as input, exception types/instances are raised. Once the script runs out
    the call blocks until cancelled, like a prompt waiting for keystrokes.
    """

    def __init__(self, lines: list[Any] | None = None) -> None:
        self.lines = list(lines or [])
        self.prompts = 0

    async def prompt_async(self, message: str = "") -> str:
        self.prompts += 1
        if not self.lines:
            await asyncio.Event().wait()
        item = self.lines.pop(0)
        if isinstance(item, BaseException) or (
            isinstance(item, type) and issubclass(item, BaseException)
        ):
            raise item
        return item


def make_console(color: bool = False) -> Console:
    """Console writing to a StringIO; ANSI colours only when asked for."""
    if color:
        return Console(
            file=StringIO(),
            theme=DEFAULT_THEME,
            force_terminal=True,
            color_system="standard",
            width=200,
            highlight=False,
        )
    return Console(
        file=StringIO(),
        theme=DEFAULT_THEME,
        force_terminal=False,
        color_system=None,
        width=200,
        highlight=False,
    )


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def presenter() -> Presenter:
    """Presenter at silent 0 writing uncoloured text to StringIO consoles."""
    return Presenter(silent=0, console=make_console(), err_console=make_console())


@pytest.fixture
def color_presenter() -> Presenter:
    """Presenter writing ANSI-coloured output (standard 8-colour palette)."""
    return Presenter(silent=0, console=make_console(color=True), err_console=make_console())


@pytest.fixture
def console_factory() -> Callable[..., Console]:
    return make_console


@pytest.fixture
def read_output() -> Callable[[Console], str]:
    return output_of


@pytest.fixture
def fake_prompt() -> type[FakePromptSession]:
    return FakePromptSession


@pytest.fixture
def until() -> Callable[..., Any]:
    return wait_until
