# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert
#
"""
Metadata about the SentryBridge package.

This module defines the version number and the SDK identity reported to Sentry.
"""

from __future__ import annotations

from typing import Final

__app_name__: Final[str] = "SentryBridge"
__app_author__: Final[str] = "Jürgen Mülbert"
__app_org_id__: Final[str] = "jmuelbert"
__app_config_name__: Final[str] = "config.toml"

"""
The version number of the SentryBridge package.
"""
__version__ = "0.1.0"

# Identity stamped into every event sent to Sentry.
__sdk_name__: Final[str] = "sentry.python.sentrybridge"
__sdk_package__: Final[str] = "pypi:sentrybridge"
