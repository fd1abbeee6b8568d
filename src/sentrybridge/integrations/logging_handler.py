# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Standard library `logging` integration.

`SentryHandler` is a `logging.Handler` that converts every record it receives
into a `LogEvent` and hands it to an `EventRouter`. It understands records
produced by `structlog.stdlib.ProcessorFormatter.wrap_for_formatter`, so it
can sit on the root logger next to the console handler configured by
`LoggingManager`.

Example usage:
--------------
    handler = SentryHandler(config=RouterConfig(dsn="https://key@sentry.example/1"))
    logging.getLogger().addHandler(handler)

    log = logging.getLogger("svc.io")
    log.debug("opening file", extra={"path": "/x"})   # breadcrumb
    log.error("disk full", extra={"path": "/x"})      # event
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from sentrybridge.core.events import LogEvent
from sentrybridge.core.router import EventRouter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sentrybridge.core.client import TelemetryClient
    from sentrybridge.core.router import RouterConfig

# Loggers whose records would feed back into the bridge.
DEFAULT_IGNORED_LOGGERS: Final[tuple[str, ...]] = (
    "sentrybridge",
    "sentry_sdk",
    "urllib3.connectionpool",
    "urllib3.connection",
)


def is_ignored_logger(name: str | None, ignored_loggers: Iterable[str]) -> bool:
    """Return True if `name` is one of `ignored_loggers` or a child of one."""
    if not name:
        return False
    return any(name == ignored or name.startswith(ignored + ".") for ignored in ignored_loggers)


class SentryHandler(logging.Handler):
    """
    Forward log records to Sentry through an `EventRouter`.

    Attributes
    ----------
    router : EventRouter
        Decides between event and breadcrumb and owns the client handle.
    ignored_loggers : tuple[str, ...]
        Logger names (and their children) whose records are dropped.

    """

    def __init__(
        self,
        router: EventRouter | None = None,
        *,
        config: RouterConfig | None = None,
        client: TelemetryClient | None = None,
        level: int = logging.NOTSET,
        ignored_loggers: Iterable[str] = DEFAULT_IGNORED_LOGGERS,
    ) -> None:
        super().__init__(level=level)
        self.router = router or EventRouter(config=config, client=client)
        self.ignored_loggers = tuple(ignored_loggers)

    def emit(self, record: logging.LogRecord) -> None:
        """Route one record; failures are reported through `handleError`."""
        if is_ignored_logger(record.name, self.ignored_loggers):
            return
        try:
            self.router.route(LogEvent.from_record(record))
        except RecursionError:
            raise
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def close(self) -> None:
        """Close the router, releasing the Sentry client, then the handler."""
        try:
            self.router.close()
        finally:
            super().close()
