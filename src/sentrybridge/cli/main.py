# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Main entry point for the SentryBridge command line.

This script handles global application initialization (settings and bootstrap
logging) before handing control to the subcommands.
"""

from __future__ import annotations

import sys
from pathlib import Path  # noqa: TC003
from typing import Annotated

import structlog
import typer
from rich.console import Console

from sentrybridge import __about__
from sentrybridge.cli.config_app import config_app
from sentrybridge.cli.options import get_config_option_definition, get_verbose_option_definition
from sentrybridge.cli.send_test_app import send_test_app
from sentrybridge.config.logging_bootstrap import bootstrap_logging
from sentrybridge.config.settings_manager import SettingsManager, SettingsManagerSingleton

# Initialize Typer CLI app and Rich console
main_app = typer.Typer(
    name="sentrybridge",
    help="Forward log records to Sentry as breadcrumbs or events.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)
"""
The main Typer application instance for SentryBridge.

This instance serves as the root command for the CLI, providing global options
and dispatching to the subcommands.
"""

main_app.add_typer(
    config_app,
    help=f"Show the {__about__.__app_name__} configuration.",
)

main_app.add_typer(
    send_test_app,
    help=f"Send a test record through {__about__.__app_name__}.",
)

console = Console()
"""A Rich Console instance for direct terminal output."""

# Ensures structlog is minimally configured before any callback logs.
bootstrap_logging()


def main_logger() -> structlog.stdlib.BoundLogger:
    """Return the structlog logger of the main module."""
    return structlog.get_logger("sentrybridge.main")


def _version_callback(*, value: bool = False) -> None:
    """
    Display the application version and exit.

    Args:
    ----
        value (bool): Whether to display the version. This option is eagerly
                      evaluated by Typer.
    """
    if value:
        console.print(
            f"[bold blue]{__about__.__app_name__}[/] version: [bold green]{__about__.__version__}[/]",
        )
        sys.exit()


def _initialize_settings_manager(config_file: Path | None) -> SettingsManager:
    """
    Initialize the SettingsManager Singleton and returns its instance.

    Args:
    ----
        config_file (Path | None): Optional path to a custom configuration file.

    Returns:
    -------
        SettingsManager: The initialized SettingsManager instance.

    Raises:
    ------
        typer.Exit: If a critical error occurs during settings initialization,
                    the application exits with status code 1.
    """
    main_logger().debug("Main callback: Initializing SettingsManager...")
    try:
        settings_manager = SettingsManagerSingleton.get_instance()
        SettingsManagerSingleton.initialize_from_context(config_path=config_file)
    except Exception as e:
        main_logger().exception("Main callback: Failed to initialize SettingsManager or load configuration!")
        console.print(f"[bold red]Critical Error:[/bold red] Failed to load application configuration: {e}")
        raise typer.Exit(1) from e

    main_logger().info("Main callback: SettingsManager initialized and configuration loaded.")
    for err in SettingsManagerSingleton.get_initialization_errors():
        main_logger().warning("Main callback: SettingsManager setup warning:", error_details=str(err))
    return settings_manager


@main_app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[int, get_verbose_option_definition()] = 0,
    config_file: Annotated[Path | None, get_config_option_definition()] = None,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the application version and exit.",
        ),
    ] = None,
) -> None:
    """
    SentryBridge forwards log records to Sentry.

    This is the main callback function for the Typer CLI application. It loads
    the settings and prepares the Typer context for subcommands.

    Args:
    ----
        ctx (typer.Context): The Typer context object, used to pass data
                              between the main callback and subcommands.
        verbose (int): Verbosity level (0=warning, 1=info, 2=debug).
        config_file (Path | None): Optional path to a custom configuration file.
        _version (bool | None): Internal option to trigger version display.
                                Handled by `_version_callback`.

    Raises:
    ------
        typer.Exit: If any critical initialization step fails.
    """
    main_logger().debug(
        "CLI Args",
        verbose=verbose,
        config_file=str(config_file) if config_file else None,
    )

    settings_manager = _initialize_settings_manager(config_file)

    ctx.ensure_object(dict)
    ctx.obj.update(
        verbose_mode=verbose,
        config_file=config_file,
        settings_manager=settings_manager,
    )


def main() -> None:
    """Invoke the Typer application to dispatch to the appropriate subcommand."""
    main_app()


if __name__ == "__main__":
    main()
