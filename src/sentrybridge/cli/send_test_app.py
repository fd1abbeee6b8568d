# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
The CLI send-test Module for typer.

This define the CLI for sending one test record through the bridge.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Final

import structlog
import typer
from rich.console import Console

from sentrybridge.cli.options import get_level_option_definition
from sentrybridge.config.logging_manager import VERBOSITY_LEVELS, LoggingManager
from sentrybridge.core.levels import parse_level
from sentrybridge.exceptions import LogHandlerError, SettingsConfigurationError

if TYPE_CHECKING:
    from sentrybridge.config.settings_manager import SettingsManager

console = Console()

send_test_app = typer.Typer(pretty_exceptions_show_locals=False)

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)

# Not below the "sentrybridge" logger, whose records the bridge ignores.
TEST_LOGGER_NAME: Final[str] = "sentrybridge_test"


@send_test_app.command("send-test")
def send_test(
    ctx: typer.Context,
    message: Annotated[
        str,
        typer.Option("--message", "-m", help="Message of the test record.", rich_help_panel="Test record"),
    ] = "SentryBridge test record",
    level: Annotated[str, get_level_option_definition()] = "error",
    with_exception: Annotated[
        bool,
        typer.Option(
            "--with-exception",
            help="Attach a RuntimeError to the test record.",
            rich_help_panel="Test record",
        ),
    ] = False,
) -> None:
    """
    Log one record through the bridge and report how it was routed.

    Logging is configured with the Sentry handler from the loaded settings,
    the record is logged and logging is shut down again, which flushes and
    closes the Sentry client.

    Args:
    ----
        ctx (typer.Context): The Typer context object, injected automatically.
        message (str): Message of the test record.
        level (str): Level name or number of the test record.
        with_exception (bool): Attach an exception to the record.

    Raises:
    ------
        typer.BadParameter: If the level is unknown.
        typer.Exit(1): If the settings are invalid or logging cannot be set up.

    """
    settings_manager: SettingsManager = ctx.obj["settings_manager"]
    verbose: int = ctx.obj.get("verbose_mode", 0)

    try:
        record_level = parse_level(level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--level") from e

    try:
        router_config = settings_manager.router_config()
    except SettingsConfigurationError as e:
        console.print(f"[bold red]Critical Error:[/bold red] Invalid Sentry settings: {e.__cause__ or e}")
        raise typer.Exit(1) from e

    if router_config.dsn is None:
        console.print("[yellow]No DSN configured: the record is not sent.[/yellow]")

    logging_manager = LoggingManager()
    try:
        logging_manager.apply_configuration(
            cli_log_level=VERBOSITY_LEVELS.get(verbose, logging.DEBUG),
            enable_console_logging=False,
            log_config=settings_manager.as_dict(),
            router_config=router_config,
        )
    except LogHandlerError as e:
        console.print(f"[bold red]Critical Error:[/bold red] Failed to set up the Sentry handler: {e}")
        raise typer.Exit(1) from e

    try:
        handler = logging_manager.sentry_handler
        kind = "event" if handler is not None and handler.router.is_full_event(record_level) else "breadcrumb"

        # A plain logging call accepts custom level numbers as well.
        test_log = logging.getLogger(TEST_LOGGER_NAME)
        if with_exception:
            try:
                msg = "SentryBridge test exception"
                raise RuntimeError(msg)
            except RuntimeError:
                test_log.log(record_level, message, extra={"source": "send-test"}, exc_info=True)
        else:
            test_log.log(record_level, message, extra={"source": "send-test"})
        log.debug("Test record logged.", record_level=logging.getLevelName(record_level), kind=kind)
    finally:
        logging_manager.shutdown()

    console.print(
        f"[bold green]Record logged[/bold green] at [bold]{logging.getLevelName(record_level)}[/bold] "
        f"and routed as [bold]{kind}[/bold]."
    )
