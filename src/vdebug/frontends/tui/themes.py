"""Colour theme for the debugger console.

Remote (client) output and debugger output use distinct palettes so the
operator can always tell which side produced a line.
"""

from rich.theme import Theme


def create_theme(
    *,
    # Remote client
    client_info: str = "cyan",
    client_warning: str = "yellow",
    client_error: str = "red",
    # Debugger itself
    debugger_info: str = "bold magenta",
    debugger_warning: str = "bold yellow",
    debugger_error: str = "bold red",
) -> Theme:
    """Create a theme with the given styles."""
    return Theme(
        {
            "client.info": client_info,
            "client.warning": client_warning,
            "client.error": client_error,
            "debugger.info": debugger_info,
            "debugger.warning": debugger_warning,
            "debugger.error": debugger_error,
        }
    )


DEFAULT_THEME = create_theme()
