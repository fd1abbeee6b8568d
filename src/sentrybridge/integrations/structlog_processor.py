# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
`structlog` integration.

`SentryProcessor` routes each event dict through an `EventRouter` and passes it
on unchanged, so it can be placed anywhere in a processor chain. Put it after
`add_log_level` and `add_logger_name` (and `CallsiteParameterAdder` if call-site
context should be sent), and before `format_exc_info`, which replaces the
exception object with text.

Use either this processor or `SentryHandler` for a given log call, not both;
otherwise the call is routed twice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sentrybridge.core.events import LogEvent
from sentrybridge.integrations.logging_handler import DEFAULT_IGNORED_LOGGERS, is_ignored_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import EventDict, WrappedLogger

    from sentrybridge.core.router import EventRouter


class SentryProcessor:
    """
    A structlog processor forwarding events to Sentry.

    Attributes
    ----------
    router : EventRouter
        Decides between event and breadcrumb and owns the client handle.
    ignored_loggers : tuple[str, ...]
        Logger names (and their children) whose events are not routed.

    """

    def __init__(self, router: EventRouter, *, ignored_loggers: Iterable[str] = DEFAULT_IGNORED_LOGGERS) -> None:
        self.router = router
        self.ignored_loggers = tuple(ignored_loggers)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        logger_name = _wrapped_logger_name(logger)
        event = LogEvent.from_event_dict(logger_name, method_name, event_dict)
        if not is_ignored_logger(event.logger_name, self.ignored_loggers):
            self.router.route(event)
        return event_dict


def _wrapped_logger_name(logger: Any) -> str | None:
    name = getattr(logger, "name", None)
    return name if isinstance(name, str) else None
