# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
The common options definitions for the SentryBridge application.
These functions return typer.Option objects to be used with Annotated.
"""

from __future__ import annotations

import typer


def get_verbose_option_definition() -> typer.Option:
    """
    Returns a typer.Option object for verbosity,
    toggling between WARNING, INFO and DEBUG.
    """
    return typer.Option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Default logging level is WARNING. Use -v to enable INFO messages. -vv to enable DEBUG messages. Additional -v flags have no further effect.",
        rich_help_panel="Logging",
    )


# Function to get the config file option definition
def get_config_option_definition() -> typer.Option:
    return typer.Option(
        "--config",
        "-c",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to the config file. A default one is created if missing.",
        rich_help_panel="Configuration",
    )


def get_level_option_definition() -> typer.Option:
    return typer.Option(
        "--level",
        "-l",
        help="Level of the test record (name or number, e.g. 'error', 'debug', 35).",
        rich_help_panel="Test record",
    )
