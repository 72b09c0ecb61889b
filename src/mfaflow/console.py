"""Terminal output for the mfaflow CLI.

Ceremony progress ("Verification code requested") and failures go to
stderr, so ``mfaflow login ... > tokens.json`` captures only the token JSON
written through ``out_console``.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console

# stderr console for ceremony progress and errors
err_console = Console(stderr=True)

# stdout console, reserved for the token JSON
out_console = Console()


def success(message: str, *, console: Console | None = None) -> None:
    """Print a success message (green checkmark) to stderr."""
    c = console or err_console
    c.print(f"[green]  ✓ {message}[/green]")


def error(message: str, *, console: Console | None = None) -> None:
    """Print an error message (red X) to stderr."""
    c = console or err_console
    c.print(f"[red]  ✗ {message}[/red]")


def info(message: str, *, console: Console | None = None) -> None:
    """Print an info message (dim) to stderr."""
    c = console or err_console
    c.print(f"[dim]  {message}[/dim]")


def tokens(data: dict[str, Any], *, console: Console | None = None) -> None:
    """Print a token result as JSON to stdout."""
    c = console or out_console
    c.print_json(json.dumps(data))
