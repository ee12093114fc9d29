"""CLI frontend for the debugger."""
