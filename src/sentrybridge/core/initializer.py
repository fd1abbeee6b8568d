# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Initialize-once cell for the telemetry client.

The handle is checked without locking first; only when it is missing is the
lock taken, the handle checked again and the init action run. The handle is
published once and read lock-free afterwards.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import structlog

from sentrybridge.exceptions import ClientInitializationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sentrybridge.core.client import ClientHandle

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)


class LazyClientInitializer:
    """
    Create the telemetry client at most once, on first use.

    Attributes
    ----------
    init_action : Callable[[str], ClientHandle | None]
        Creates and connects the client for a DSN.
    close_action : Callable[[ClientHandle], None]
        Releases a handle produced by `init_action`.

    """

    def __init__(
        self,
        init_action: Callable[[str], ClientHandle | None],
        close_action: Callable[[ClientHandle], None],
    ) -> None:
        self.init_action = init_action
        self.close_action = close_action
        self._handle: ClientHandle | None = None
        self._failure: ClientInitializationError | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def handle(self) -> ClientHandle | None:
        """The published handle, or None while uninitialized."""
        return self._handle

    def ensure_initialized(self, dsn: str) -> ClientHandle | None:
        """
        Return the client handle, creating it on the first call.

        Returns None once the cell was closed; a released client is never
        created again.

        Raises:
        ------
            ClientInitializationError: If the init action produced no handle.
                                       Later calls raise a new error caused by the
                                       first one; initialization is not retried.

        """
        handle = self._handle
        if handle is not None:
            return handle

        created = False
        with self._lock:
            if self._handle is None:
                if self._closed:
                    return None
                if self._failure is not None:
                    msg = "Telemetry client initialization failed earlier."
                    raise ClientInitializationError(msg, self._failure)
                handle = self.init_action(dsn)
                if handle is None:
                    self._failure = ClientInitializationError("Telemetry client initialization returned no handle.")
                    raise self._failure
                self._handle = handle
                created = True
            handle = self._handle

        # Logging may re-enter the bridge; never do it while holding the lock.
        if created:
            log.info("Telemetry client initialized.")
        return handle

    def close(self) -> None:
        """Release the handle exactly once. Closing an uninitialized cell is a no-op."""
        with self._lock:
            handle, self._handle = self._handle, None
            self._closed = True
        if handle is not None:
            self.close_action(handle)
