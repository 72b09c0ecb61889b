"""mfaflow CLI - finish an MFA login from the terminal.

Reads provider settings from MFAFLOW_* environment variables (or .env),
starts the ceremony with an MFA token, prompts for the code and prints the
resulting tokens as JSON.
"""

import asyncio
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import mfaflow
from mfaflow import console as mf_console
from mfaflow.config import get_settings
from mfaflow.exceptions import MfaFlowError
from mfaflow.logging import configure_logging, get_logger
from mfaflow.orchestrator import MultiFactorAuthentication
from mfaflow.results import Result
from mfaflow.transport import RequestsTransport

# Configure logging early using env vars directly.
# The -v/-vv and --log-format flags in main_callback() may reconfigure later.
configure_logging(
    level=os.environ.get("MFAFLOW_LOG_LEVEL", "WARNING"),
    json_output=os.environ.get("MFAFLOW_LOG_FORMAT", "console") == "json",
)

LOG = get_logger(__name__)

app = typer.Typer(
    name="mfaflow",
    help="""
    🔐 mfaflow - complete multi-factor authentication from the terminal

    \b
    Quick start:
      export MFAFLOW_DOMAIN=tenant.auth0.com MFAFLOW_CLIENT_ID=...
      mfaflow login --mfa-token <token> --phone +15551234
    """,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback(invoke_without_command=True)
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for info, -vv for debug)",
        ),
    ] = 0,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            help="Log output format: console (human-readable) or json (structured)",
        ),
    ] = None,
) -> None:
    """mfaflow - complete multi-factor authentication from the terminal."""
    settings = get_settings()
    json_output = (log_format or settings.log_format) == "json"

    # stdout is reserved for token JSON; logs go to stderr
    if verbose >= 2:
        level = "DEBUG"
    elif verbose >= 1:
        level = "INFO"
    else:
        level = settings.log_level
    configure_logging(level=level, json_output=json_output)


@app.command("version")
def version() -> None:
    """Show mfaflow version."""
    console.print(
        Panel(
            f"[bold cyan]mfaflow[/bold cyan] v{mfaflow.__version__}",
            title="Multi-factor authentication",
            border_style="cyan",
        )
    )


@app.command("config")
def config() -> None:
    """Show the resolved provider and ceremony configuration."""
    settings = get_settings()
    try:
        options = settings.get_options()
    except ValueError as exc:
        mf_console.error(str(exc))
        raise typer.Exit(1) from exc

    table = Table(title="mfaflow configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Domain", settings.domain or "[red]not set[/red]")
    table.add_row("Client ID", "set" if settings.client_id else "[red]not set[/red]")
    table.add_row("Challenge type", options.challenge_type)
    table.add_row("OOB channels", ", ".join(options.oob_channels) or "-")
    table.add_row("Authenticator types", ", ".join(options.authenticator_types))
    table.add_row("Grant type", options.grant_type)
    table.add_row("Timeout", f"{settings.timeout}s")
    console.print(table)


def _exit_on_error(step: str, result: Result) -> None:
    if not result.ok:
        LOG.debug("cli_step_failed", step=step, error=result.name)
        mf_console.error(f"{step} failed: {result.description}")
        raise typer.Exit(1)


@app.command("login")
def login(
    mfa_token: Annotated[
        str,
        typer.Option("--mfa-token", "-t", help="MFA token from primary authentication"),
    ],
    phone: Annotated[
        str | None,
        typer.Option("--phone", "-p", help="Phone number for sms/voice enrollment"),
    ] = None,
    code: Annotated[
        str | None,
        typer.Option("--code", "-c", help="Verification code (prompted for when omitted)"),
    ] = None,
) -> None:
    """Run a full MFA ceremony and print the resulting tokens as JSON."""
    settings = get_settings()
    try:
        provider_config = settings.get_provider_config()
    except ValueError as exc:
        mf_console.error(str(exc))
        raise typer.Exit(1) from exc

    transport = RequestsTransport()
    mfa = MultiFactorAuthentication(transport=transport, **provider_config)
    try:
        started = asyncio.run(mfa.start(mfa_token, phone))
        _exit_on_error("Challenge", started)
        mf_console.success("Verification code requested")

        if code is None:
            mf_console.info("Enter the code from your phone or authenticator app")
            code = typer.prompt("Verification code")
        completed = asyncio.run(mfa.complete(code))
        _exit_on_error("Token exchange", completed)
    except (MfaFlowError, ValueError) as exc:
        mf_console.error(str(exc))
        raise typer.Exit(1) from exc
    finally:
        transport.close()

    mf_console.success("MFA complete")
    mf_console.tokens(completed.data)


def main() -> None:
    """Entry point for the mfaflow console script."""
    app()
