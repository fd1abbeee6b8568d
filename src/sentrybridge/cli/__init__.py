# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
SentryBridge CLI Module.

CLI Commands:

    - `show-config`: Print the effective Sentry settings.
    - `send-test`: Log one record through the bridge and report how it was routed.

Dependencies:

    - `typer`: For the command-line interface (CLI).
    - `rich`: For nice and look well console outputs
    - `sentrybridge.config.settings_manager`: For loading the settings.
    - `sentrybridge.config.logging_manager`: For installing the Sentry handler.
"""
