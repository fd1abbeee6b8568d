# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Route log events to Sentry as events or breadcrumbs.

`EventRouter.route` is the entry point of the bridge. For every log event it
makes sure the telemetry client is ready, classifies the event against the
configured breadcrumb threshold and hands exactly one payload to the client:

- levels more severe than ``minimum_breadcrumb_level`` become full events,
- every other level becomes a breadcrumb.

Severity follows the `logging` convention: a larger level number is more
severe, so with the default threshold of ``WARNING`` only ``ERROR`` and
``CRITICAL`` records are reported as events.

Without a DSN the router is inert and `route` does nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from sentrybridge.__about__ import __sdk_name__, __sdk_package__, __version__
from sentrybridge.core.client import SentryClient
from sentrybridge.core.events import Breadcrumb, ErrorPayload, TelemetryEvent
from sentrybridge.core.initializer import LazyClientInitializer
from sentrybridge.core.levels import parse_level, to_breadcrumb_level, to_event_level
from sentrybridge.core.properties import RESERVED_PREFIX, extract_properties

if TYPE_CHECKING:
    from types import TracebackType

    from sentrybridge.core.client import ClientHandle, TelemetryClient
    from sentrybridge.core.events import LogEvent

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)


class RouterConfig(BaseModel):
    """
    Pydantic model holding the router configuration.

    The model is frozen: it is set once before the first event is routed and
    read-only afterwards.

    Attributes
    ----------
    dsn : str | None
        Sentry DSN. Without it the router stays inert.
    send_identity : bool
        Forward the identity of the caller as Sentry user id.
    environment : str | None
        Environment tag stamped into events.
    minimum_breadcrumb_level : int
        Events more severe than this level are sent as full events, the others
        as breadcrumbs. Accepts a level number or a level name.
    reserved_prefix : str
        Custom properties whose key starts with this prefix are never sent.

    """

    dsn: str | None = None
    send_identity: bool = False
    environment: str | None = None
    minimum_breadcrumb_level: int = logging.WARNING
    reserved_prefix: str = RESERVED_PREFIX

    model_config = ConfigDict(frozen=True)

    @field_validator("dsn", "environment", mode="before")
    @classmethod
    def blank_as_none(cls, value: Any) -> Any:
        """Treat empty and whitespace-only strings as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("minimum_breadcrumb_level", mode="before")
    @classmethod
    def level_from_name(cls, value: Any) -> int:
        """
        Accept level names as well as numbers.

        Raises:
        ------
            ValueError: If the value does not name a known level.

        """
        return parse_level(value)


class EventRouter:
    """
    Decide per log event between a Sentry event and a breadcrumb.

    Attributes
    ----------
    config : RouterConfig
        The immutable router configuration.
    client : TelemetryClient
        The telemetry capability the payloads are handed to.

    """

    def __init__(self, config: RouterConfig | None = None, client: TelemetryClient | None = None) -> None:
        self.config = config or RouterConfig()
        self.client = client or SentryClient()
        self._initializer = LazyClientInitializer(self.client.initialize_client, self.client.close_client)
        self._closed = False

    @property
    def handle(self) -> ClientHandle | None:
        """The client handle created by this router, if any."""
        return self._initializer.handle

    @property
    def closed(self) -> bool:
        return self._closed

    def is_full_event(self, level: int | None) -> bool:
        """Return True if events of this level are sent as full events."""
        if level is None:
            level = logging.NOTSET
        return self.config.minimum_breadcrumb_level < level

    def route(self, event: LogEvent | None) -> None:
        """
        Forward one log event to the telemetry client.

        Exactly one of `capture_event` or `add_breadcrumb` is called, or none
        when the event is None, the router is closed or no DSN is configured.

        Raises:
        ------
            ClientInitializationError: If the client could not be created.

        """
        if event is None or self._closed:
            return

        if not self.client.is_enabled() and self._initializer.handle is None:
            if self.config.dsn is None:
                return
            if self._initializer.ensure_initialized(self.config.dsn) is None:
                # Closed while this event was in flight.
                return

        if self.is_full_event(event.level):
            self.client.capture_event(self.build_event(event))
        else:
            crumb = self.build_breadcrumb(event)
            self.client.add_breadcrumb(crumb.message, crumb.category, crumb.type, crumb.data, crumb.level)

    def build_event(self, event: LogEvent) -> TelemetryEvent:
        """Build the full Sentry event for a log event."""
        exception = event.exception
        if exception is None and isinstance(event.payload, ErrorPayload):
            exception = event.payload.error

        telemetry_event = TelemetryEvent(
            exception=exception,
            level=to_event_level(event.level),
            logger=event.logger_name,
            sdk={
                "name": __sdk_name__,
                "version": __version__,
                "packages": [{"name": __sdk_package__, "version": __version__}],
            },
        )

        if _has_text(event.rendered_message):
            telemetry_event.message = event.rendered_message

        telemetry_event.extra.update(extract_properties(event, self.config.reserved_prefix))

        if self.config.send_identity and _has_text(event.identity):
            telemetry_event.user = {"id": event.identity}

        if self.config.environment:
            telemetry_event.environment = self.config.environment

        return telemetry_event

    def build_breadcrumb(self, event: LogEvent) -> Breadcrumb:
        """Build the breadcrumb for a log event; data values are rendered as strings."""
        return Breadcrumb(
            message=event.rendered_message if _has_text(event.rendered_message) else "",
            category=event.logger_name,
            type="",
            level=to_breadcrumb_level(event.level),
            data={key: str(value) for key, value in extract_properties(event, self.config.reserved_prefix)},
        )

    def close(self) -> None:
        """Release the client handle. Later events are ignored."""
        if self._closed:
            return
        self._closed = True
        log.debug("Closing event router.")
        self._initializer.close()

    def __enter__(self) -> EventRouter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def _has_text(value: str | None) -> bool:
    return value is not None and bool(value.strip())
