# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
SentryBridge integrations.

- `SentryHandler`: a `logging.Handler` for the standard library.
- `SentryProcessor`: a processor for `structlog` chains.
"""

from sentrybridge.integrations.logging_handler import SentryHandler
from sentrybridge.integrations.structlog_processor import SentryProcessor

__all__ = ["SentryHandler", "SentryProcessor"]
