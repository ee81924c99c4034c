"""dcfail CLI - inspect data-call fail cause codes.

Commands
--------
    dcfail explain 0x24 --restart-radio
    dcfail table --permanent
    dcfail version

The restart policy for ``explain`` comes from --restart-radio/--no-restart-radio
when given, otherwise from dcfail.yaml and DCFAIL_* environment variables.
"""

from __future__ import annotations

import logging
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from dcfail.core.config import Config, load_config
from dcfail.core.exceptions import DcFailError, WireCodeError
from dcfail.core.fail_cause import (
    FailCause,
    FailCauseCategory,
    FailCauseReport,
    classify,
    is_event_loggable,
    is_permanent,
)
from dcfail.core.logging import FailCauseLogger, configure_logging

console = Console()


def parse_wire_code(text: str) -> int:
    """Parse a decimal, hex (0x..) or negative wire code.

    Zero-padded decimals such as "08" are read as decimal.
    """
    text = text.strip()
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        return int(text, 10)
    except ValueError as e:
        raise WireCodeError(text) from e


def format_code(code: int) -> str:
    """Render a code the way it is declared: hex if non-negative."""
    return f"{code:#x}" if code >= 0 else str(code)


def _handle_cli_error(e: DcFailError, operation_name: str, show_debug: bool) -> None:
    """
    Print a DcFailError with its troubleshooting steps.

    Args:
        e: The exception that occurred
        operation_name: Human-readable operation name
        show_debug: Whether to show technical details
    """
    typer.echo(
        f"✗ Error [{e.error_code}] during {operation_name}: {e.user_message}",
        err=True,
    )
    typer.echo(f"  Why: {e.why_it_happened}", err=True)
    typer.echo("  Troubleshooting:", err=True)
    for i, fix in enumerate(e.how_to_fix, 1):
        typer.echo(f"    {i}. {fix}", err=True)
    if not show_debug:
        typer.echo("  Run with --debug for more information", err=True)

    logger = logging.getLogger(__name__)
    logger.error(
        f"[{operation_name}] {type(e).__name__}: {e}", exc_info=show_debug
    )


def safe_cli_command(
    operation_name: str,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to wrap CLI commands with user-friendly error handling.

    Args:
        operation_name: Human-readable operation name for error context

    Returns:
        Decorator function that wraps the command with error handling
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except DcFailError as e:
                ctx = kwargs.get("ctx")
                show_debug = bool(ctx and ctx.obj and ctx.obj.get("debug"))
                _handle_cli_error(e, operation_name, show_debug)
                raise typer.Exit(code=1)

        return wrapper

    return decorator


app = typer.Typer(
    name="dcfail",
    help="Classify data-call fail cause codes reported by the modem",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to dcfail.yaml"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
) -> None:
    """dcfail - data-call fail cause inspector."""
    ctx.obj = {"config_path": config_path, "debug": debug}
    if debug:
        configure_logging(level="DEBUG")

    if version:
        _print_version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_settings(ctx: typer.Context) -> Config:
    """Load config and apply its logging settings unless --debug is set."""
    obj = ctx.obj or {}
    config = load_config(obj.get("config_path"))
    level = "DEBUG" if obj.get("debug") else config.logging.level
    configure_logging(level=level, log_file=config.logging.file_path)
    return config


def _render_report(report: FailCauseReport) -> Table:
    table = Table(title=f"Fail cause {format_code(report.code)}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Cause", report.cause.name)
    table.add_row("Declared code", format_code(report.cause.code))
    table.add_row("Category", report.category.value)
    table.add_row("Permanent", _yes_no(report.permanent))
    table.add_row("Retryable", _yes_no(report.retryable))
    table.add_row("Event loggable", _yes_no(report.event_loggable))
    table.add_row("Restart radio", _yes_no(report.restart_radio))
    return table


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


@app.command("explain")
@safe_cli_command("explain")
def explain_command(
    ctx: typer.Context,
    code: str = typer.Argument(
        ..., help="Wire code such as 36 or 0x24 (put -- before negative codes)"
    ),
    restart_radio: Optional[bool] = typer.Option(
        None,
        "--restart-radio/--no-restart-radio",
        help="Restart policy for REGULAR_DEACTIVATION (default: from config)",
    ),
    apn: Optional[str] = typer.Option(
        None, "--apn", help="Also record the failure in the log for this APN"
    ),
) -> None:
    """Resolve a wire code and show how it is classified."""
    try:
        wire_code = parse_wire_code(code)
    except WireCodeError as e:
        raise typer.BadParameter(
            f"{e}. {' / '.join(e.how_to_fix)}", param_hint="CODE"
        ) from e

    config = _load_settings(ctx)
    if restart_radio is None:
        restart_radio = config.data_call.restart_radio_on_regular_deactivation

    report = classify(wire_code, restart_on_regular_deactivation=restart_radio)
    console.print(_render_report(report))
    if not report.recognized:
        console.print(
            f"[yellow]Code {format_code(wire_code)} is not declared; "
            "treated as UNKNOWN[/yellow]"
        )

    if apn:
        FailCauseLogger(apn=apn).record(report)


@app.command("table")
def table_command(
    permanent: bool = typer.Option(
        False, "--permanent", help="Only permanent causes"
    ),
    loggable: bool = typer.Option(
        False, "--loggable", help="Only event-loggable causes"
    ),
    category: Optional[FailCauseCategory] = typer.Option(
        None, "--category", case_sensitive=False, help="Only causes in this range"
    ),
) -> None:
    """List every declared fail cause with its policy."""
    causes = [
        cause
        for cause in FailCause
        if (not permanent or is_permanent(cause))
        and (not loggable or is_event_loggable(cause))
        and (category is None or cause.category is category)
    ]

    table = Table(title=f"Fail causes ({len(causes)})")
    table.add_column("Cause", overflow="fold")
    table.add_column("Code", justify="right")
    table.add_column("Category")
    table.add_column("Permanent")
    table.add_column("Loggable")
    for cause in causes:
        table.add_row(
            cause.name,
            format_code(cause.code),
            cause.category.value,
            _yes_no(is_permanent(cause)),
            _yes_no(is_event_loggable(cause)),
        )
    console.print(table)


def _print_version() -> None:
    from dcfail import __version__

    typer.echo(f"dcfail {__version__}")


@app.command("version")
def version_command() -> None:
    """Show the installed version."""
    _print_version()


def cli_main() -> None:
    """Console script entry point."""
    app()
