"""Interactive debugger console.

Components:
    Presenter: Formats and writes everything the operator sees.
    PromptLoop: Reads operator input and drives one Session.
    Debugger: Ties the websocket listener to sessions and prompts.
"""

from vdebug.frontends.tui.debugger import Debugger
from vdebug.frontends.tui.presenter import Presenter
from vdebug.frontends.tui.prompt_loop import LoopExit, PromptLoop

__all__ = [
    "Debugger",
    "LoopExit",
    "Presenter",
    "PromptLoop",
]
