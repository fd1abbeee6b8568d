# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
The CLI show-config Module for typer.

This define the CLI for printing the effective Sentry settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

import structlog
import typer
from rich.console import Console
from rich.table import Table

from sentrybridge.exceptions import SettingsConfigurationError

if TYPE_CHECKING:
    from sentrybridge.config.settings_manager import SettingsManager

console = Console()

config_app = typer.Typer(pretty_exceptions_show_locals=False)

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)


def mask_dsn(dsn: str | None) -> str:
    """Hide the key part of a DSN, keeping scheme, host and project."""
    if not dsn:
        return "-"
    parts = urlsplit(dsn)
    if "@" not in parts.netloc:
        return dsn
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit((parts.scheme, f"***@{host}", parts.path, parts.query, parts.fragment))


@config_app.command("show-config")
def show_config(ctx: typer.Context) -> None:
    """
    Print the effective Sentry settings.

    The values are read from the loaded configuration file after environment
    overrides. The DSN key is masked.

    Args:
    ----
        ctx (typer.Context): The Typer context object, injected automatically.

    Raises:
    ------
        typer.Exit(1): If the Sentry settings are invalid.

    """
    settings_manager: SettingsManager = ctx.obj["settings_manager"]

    try:
        router_config = settings_manager.router_config()
    except SettingsConfigurationError as e:
        console.print(f"[bold red]Critical Error:[/bold red] Invalid Sentry settings: {e.__cause__ or e}")
        log.exception("Invalid Sentry settings.")
        raise typer.Exit(1) from e

    sentry_settings = settings_manager.get_section("sentry")

    table = Table(title="Sentry settings")
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    table.add_row("config file", str(settings_manager.loaded_config_file or "-"))
    table.add_row("dsn", mask_dsn(router_config.dsn))
    table.add_row("environment", router_config.environment or "-")
    table.add_row("send_identity", str(router_config.send_identity))
    table.add_row(
        "minimum_breadcrumb_level",
        logging.getLevelName(router_config.minimum_breadcrumb_level),
    )
    table.add_row("handler_level", str(sentry_settings.get("handler_level", "DEBUG")))
    table.add_row("reserved_prefix", router_config.reserved_prefix)
    console.print(table)

    if router_config.dsn is None:
        console.print("[yellow]No DSN configured: the bridge is inert.[/yellow]")
