"""Frontends - operator-facing interfaces.

    tui/  Interactive console (presenter, prompt loop, application)
    cli/  Command line entry point
"""
