# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any

import pytest
import structlog
from typer.testing import CliRunner

from sentrybridge.config.settings_manager import SettingsManagerSingleton
from sentrybridge.core.client import ClientHandle

if TYPE_CHECKING:
    from collections.abc import Generator

    from structlog.typing import EventDict

    from sentrybridge.core.events import TelemetryEvent


class RecordingClient:
    """
    In-memory `TelemetryClient` recording every call made by the router.

    Attributes
    ----------
    enabled : bool
        Value returned by `is_enabled`.
    return_handle : bool
        If False, `initialize_client` returns None to simulate a failed init.
    init_delay : float
        Seconds `initialize_client` sleeps, to widen race windows.

    """

    def __init__(self, *, enabled: bool = False, return_handle: bool = True, init_delay: float = 0.0) -> None:
        self.enabled = enabled
        self.return_handle = return_handle
        self.init_delay = init_delay
        self.init_calls: list[str] = []
        self.events: list[TelemetryEvent] = []
        self.breadcrumbs: list[dict[str, Any]] = []
        self.closed_handles: list[ClientHandle] = []
        self._lock = threading.Lock()

    def is_enabled(self) -> bool:
        return self.enabled

    def initialize_client(self, dsn: str) -> ClientHandle | None:
        with self._lock:
            self.init_calls.append(dsn)
        if self.init_delay:
            time.sleep(self.init_delay)
        return ClientHandle() if self.return_handle else None

    def capture_event(self, event: TelemetryEvent) -> None:
        with self._lock:
            self.events.append(event)

    def add_breadcrumb(
        self,
        message: str,
        category: str | None,
        crumb_type: str,
        data: dict[str, str],
        level: str,
    ) -> None:
        with self._lock:
            self.breadcrumbs.append(
                {"message": message, "category": category, "type": crumb_type, "data": data, "level": level}
            )

    def close_client(self, handle: ClientHandle) -> None:
        self.closed_handles.append(handle)
        handle.close()


@pytest.fixture(scope="function", autouse=True)
def structlog_base_config() -> Generator[None, None, None]:
    root_logger = logging.getLogger()

    root_logger.setLevel(logging.DEBUG)  # Important: set root logger level so structlog processes messages

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
    root_logger.setLevel(logging.NOTSET)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture
def cleanup_singletons() -> Generator[None, None, None]:
    """Reset the settings singleton before and after a test."""
    SettingsManagerSingleton.reset()
    yield
    SettingsManagerSingleton.reset()


@pytest.fixture
def caplog_structlog() -> Generator[list[EventDict], None, None]:
    """
    Captures `structlog` events for the duration of a test.

    Returns:
    -------
        A list of `EventDict` objects representing the captured log events.
    """
    with structlog.testing.capture_logs() as captured_events:
        yield captured_events


@pytest.fixture
def recording_client() -> RecordingClient:
    """A fresh `RecordingClient` that is not enabled and initializes successfully."""
    return RecordingClient()


@pytest.fixture
def client_factory() -> type[RecordingClient]:
    """The `RecordingClient` class, for tests needing non-default behavior."""
    return RecordingClient


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def make_record() -> Any:
    """
    Build `logging.LogRecord` objects the way `Logger.makeRecord` does.

    Keyword arguments not known to LogRecord are set as extras.
    """

    def _make(
        msg: Any = "message",
        *,
        level: int = logging.INFO,
        name: str = "svc.io",
        args: tuple[Any, ...] = (),
        exc_info: Any = None,
        **extra: Any,
    ) -> logging.LogRecord:
        record = logging.LogRecord(name, level, "/app/svc/io.py", 42, msg, args, exc_info, func="write")
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    return _make
