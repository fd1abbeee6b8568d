# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
The telemetry client capability used by the router.

`TelemetryClient` is the surface the router depends on. `SentryClient`
implements it on top of `sentry_sdk`; tests substitute a recording fake.
Transport, retries and batching are left entirely to `sentry_sdk`.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import event_from_exception

if TYPE_CHECKING:
    from sentry_sdk.client import BaseClient

    from sentrybridge.core.events import TelemetryEvent

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)


class ClientHandle:
    """
    Owns the lifetime of one initialized telemetry client.

    The client `sentry_sdk.init` installed is registered on an `ExitStack`;
    closing the handle unwinds it, which flushes and closes the client.
    Closing twice is a no-op.
    """

    def __init__(self, client: BaseClient | None = None) -> None:
        self._stack = ExitStack()
        self._closed = False
        if client is not None:
            self._stack.callback(client.close)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stack.close()

    def __enter__(self) -> ClientHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@runtime_checkable
class TelemetryClient(Protocol):
    """Capabilities the router needs from a telemetry backend."""

    def is_enabled(self) -> bool: ...

    def initialize_client(self, dsn: str) -> ClientHandle | None: ...

    def capture_event(self, event: TelemetryEvent) -> None: ...

    def add_breadcrumb(
        self,
        message: str,
        category: str | None,
        crumb_type: str,
        data: dict[str, str],
        level: str,
    ) -> None: ...

    def close_client(self, handle: ClientHandle) -> None: ...


class SentryClient:
    """
    `TelemetryClient` backed by the global `sentry_sdk` hub.

    Attributes
    ----------
    init_options : dict[str, Any]
        Extra keyword arguments passed to `sentry_sdk.init` next to the DSN,
        e.g. ``environment`` or ``release``. sentry_sdk's own
        `LoggingIntegration` is always disabled: the bridge is the only path
        from log records to Sentry.

    """

    def __init__(self, **init_options: Any) -> None:
        disabled = list(init_options.pop("disabled_integrations", None) or ())
        if not any(_is_logging_integration(integration) for integration in disabled):
            disabled.append(LoggingIntegration())
        self.init_options = {**init_options, "disabled_integrations": disabled}

    def is_enabled(self) -> bool:
        """Return True if a Sentry client is already active in this process."""
        return sentry_sdk.get_client().is_active()

    def initialize_client(self, dsn: str) -> ClientHandle | None:
        """Initialize `sentry_sdk` from a DSN and return the handle owning it."""
        sentry_sdk.init(dsn=dsn, **self.init_options)
        client = sentry_sdk.get_client()
        if not client.is_active():
            return None
        return ClientHandle(client)

    def capture_event(self, event: TelemetryEvent) -> None:
        """Send a full event, expanding its exception into Sentry's exception interface."""
        hint = None
        payload: dict[str, Any] = {}
        if event.exception is not None:
            payload, hint = event_from_exception(
                event.exception,
                client_options=sentry_sdk.get_client().options,
                mechanism={"type": "logging", "handled": True},
            )
        payload.update(event.to_payload())
        sentry_sdk.capture_event(payload, hint=hint)

    def add_breadcrumb(
        self,
        message: str,
        category: str | None,
        crumb_type: str,
        data: dict[str, str],
        level: str,
    ) -> None:
        sentry_sdk.add_breadcrumb(
            {
                "message": message,
                "category": category,
                "type": crumb_type,
                "data": data,
                "level": level,
            }
        )

    def close_client(self, handle: ClientHandle) -> None:
        log.debug("Closing Sentry client.")
        handle.close()


def _is_logging_integration(integration: Any) -> bool:
    return getattr(integration, "identifier", None) == LoggingIntegration.identifier
