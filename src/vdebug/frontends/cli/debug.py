"""The ``vdebug`` command - start the debugger and wait for a client."""

from __future__ import annotations

import asyncio
import sys

import rich_click as click

from vdebug.frontends.cli.output import error_exit, error_print


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="vendetta-debug")
@click.option(
    "--port",
    default=None,
    help="Port to listen on. Defaults to VDEBUG_PORT or 9090.",
)
@click.option(
    "--silent",
    default=None,
    help="0: show everything, 1: hide the welcome banner, "
    "2: raw client logs only. Defaults to VDEBUG_SILENT or 0.",
)
@click.option(
    "--onConnectedPath",
    "--on-connected-path",
    "on_connected_path",
    default=None,
    help="File whose contents are sent to the client as soon as it connects.",
)
@click.option(
    "--eval-mode",
    type=click.Choice(["inspect", "raw"]),
    default="inspect",
    show_default=True,
    help="inspect: evaluate and pretty-print remotely, raw: send input as-is.",
)
@click.option(
    "--timeout",
    "reply_timeout",
    default=None,
    help="Seconds to wait for a reply before giving the prompt back (default: forever).",
)
@click.option("--log-level", default=None, help="Diagnostic log level (default: WARNING).")
@click.option("--log-file", default=None, help="Also write diagnostics to this file.")
def debug(
    port: str | None,
    silent: str | None,
    on_connected_path: str | None,
    eval_mode: str,
    reply_timeout: str | None,
    log_level: str | None,
    log_file: str | None,
) -> None:
    """Remote debugger for Vendetta.

    Listens for a websocket connection from the Discord client and opens a
    prompt. Every line you type is evaluated in the client and the result
    is printed here; client console output is shown as it arrives.

    **Examples:**

        vdebug

        vdebug --port 9091 --silent 1

        vdebug --onConnectedPath ./init.js
    """
    from vdebug.core.config import DebuggerConfig
    from vdebug.core.errors import BindError, ConfigError
    from vdebug.core.logging_config import configure_logging
    from vdebug.frontends.tui.debugger import Debugger

    try:
        config = DebuggerConfig.from_options(
            port=port,
            silent=silent,
            on_connected_path=on_connected_path,
            reply_timeout=reply_timeout,
            eval_mode=eval_mode,
        )
    except ConfigError as e:
        if e.errno is not None:
            # Unreadable on-connect file: surface the OS error code
            error_print(str(e))
            sys.exit(e.errno)
        error_exit(str(e))

    try:
        configure_logging(level=log_level, file_path=log_file)
    except (ValueError, OSError) as e:
        error_exit(str(e))

    debugger = Debugger(config)
    try:
        interrupted = asyncio.run(debugger.run())
    except BindError as e:
        error_exit(str(e))
    except KeyboardInterrupt:
        interrupted = True

    if interrupted:
        sys.exit(130)
