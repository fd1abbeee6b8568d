# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert
#
"""
SentryBridge Module.

Forward log events from `logging` and `structlog` to Sentry, either as
breadcrumbs or as full events depending on their severity.

The module includes the following features:
- Routing of log events with a configurable breadcrumb threshold.
- Lazy, thread-safe initialization of the Sentry client on first use.
- Extraction of custom context, call-site, thread and process information.
- Configuration from a TOML file and environment variables.
"""

from sentrybridge.__about__ import __version__
from sentrybridge.core.events import LogEvent
from sentrybridge.core.router import EventRouter, RouterConfig
from sentrybridge.integrations.logging_handler import SentryHandler
from sentrybridge.integrations.structlog_processor import SentryProcessor

__all__ = [
    "EventRouter",
    "LogEvent",
    "RouterConfig",
    "SentryHandler",
    "SentryProcessor",
    "__version__",
]
