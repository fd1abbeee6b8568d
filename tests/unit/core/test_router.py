# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""Unit tests for `EventRouter` and `RouterConfig`."""

from __future__ import annotations

import logging
import threading
from typing import Any

import pytest
from pydantic import ValidationError

from sentrybridge.__about__ import __sdk_name__, __version__
from sentrybridge.core.events import ErrorPayload, LocationInfo, LogEvent, OtherPayload
from sentrybridge.core.router import EventRouter, RouterConfig
from sentrybridge.exceptions import ClientInitializationError

DSN = "https://public@o0.ingest.sentry.io/1"


def make_event(level: int | None = logging.ERROR, **kwargs: Any) -> LogEvent:
    kwargs.setdefault("rendered_message", "disk full")
    kwargs.setdefault("logger_name", "svc.io")
    return LogEvent(level=level, level_name=logging.getLevelName(level) if level is not None else None, **kwargs)


@pytest.fixture
def router(recording_client: Any) -> EventRouter:
    return EventRouter(RouterConfig(dsn=DSN), recording_client)


@pytest.mark.unit
class TestRouterConfig:
    def test_defaults(self) -> None:
        config = RouterConfig()

        assert config.dsn is None
        assert config.send_identity is False
        assert config.environment is None
        assert config.minimum_breadcrumb_level == logging.WARNING
        assert config.reserved_prefix == "logging:"

    def test_blank_strings_are_not_configured(self) -> None:
        config = RouterConfig(dsn="   ", environment="")

        assert config.dsn is None
        assert config.environment is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("error", logging.ERROR), ("WARN", logging.WARNING), (15, 15), ("25", 25)],
    )
    def test_threshold_accepts_names_and_numbers(self, value: Any, expected: int) -> None:
        assert RouterConfig(minimum_breadcrumb_level=value).minimum_breadcrumb_level == expected

    def test_unknown_threshold_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RouterConfig(minimum_breadcrumb_level="LOUD")

    def test_is_frozen(self) -> None:
        config = RouterConfig()

        with pytest.raises(ValidationError):
            config.dsn = DSN  # type: ignore[misc]


@pytest.mark.unit
class TestClassification:
    @pytest.mark.parametrize(
        ("level", "full_event"),
        [
            (logging.DEBUG, False),
            (logging.INFO, False),
            (logging.WARNING, False),
            (logging.ERROR, True),
            (logging.CRITICAL, True),
            (None, False),
        ],
    )
    def test_default_threshold(self, router: EventRouter, level: int | None, full_event: bool) -> None:
        assert router.is_full_event(level) is full_event

    def test_custom_threshold(self, recording_client: Any) -> None:
        router = EventRouter(RouterConfig(dsn=DSN, minimum_breadcrumb_level="DEBUG"), recording_client)

        assert router.is_full_event(logging.DEBUG) is False
        assert router.is_full_event(logging.INFO) is True

    @pytest.mark.parametrize("level", [None, logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, 51])
    def test_exactly_one_payload_per_event(self, router: EventRouter, recording_client: Any, level: int | None) -> None:
        router.route(make_event(level))

        assert len(recording_client.events) + len(recording_client.breadcrumbs) == 1


@pytest.mark.unit
class TestRouting:
    def test_none_event_is_ignored(self, router: EventRouter, recording_client: Any) -> None:
        router.route(None)

        assert recording_client.init_calls == []
        assert recording_client.events == []
        assert recording_client.breadcrumbs == []

    def test_no_dsn_is_inert(self, recording_client: Any) -> None:
        router = EventRouter(RouterConfig(), recording_client)

        router.route(make_event(logging.CRITICAL))
        router.route(make_event(logging.DEBUG))

        assert recording_client.init_calls == []
        assert recording_client.events == []
        assert recording_client.breadcrumbs == []

    def test_enabled_client_is_used_without_dsn(self, client_factory: Any) -> None:
        client = client_factory(enabled=True)
        router = EventRouter(RouterConfig(), client)

        router.route(make_event(logging.ERROR))

        assert client.init_calls == []
        assert len(client.events) == 1

    def test_enabled_client_is_not_initialized_again(self, client_factory: Any) -> None:
        client = client_factory(enabled=True)
        router = EventRouter(RouterConfig(dsn=DSN), client)

        router.route(make_event(logging.ERROR))

        assert client.init_calls == []
        assert router.handle is None

    def test_first_event_initializes_client(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.INFO))
        router.route(make_event(logging.ERROR))

        assert recording_client.init_calls == [DSN]
        assert router.handle is not None

    def test_concurrent_events_initialize_once(self, client_factory: Any) -> None:
        client = client_factory(init_delay=0.01)
        router = EventRouter(RouterConfig(dsn=DSN), client)
        barrier = threading.Barrier(32)

        def worker() -> None:
            barrier.wait()
            router.route(make_event(logging.ERROR))

        threads = [threading.Thread(target=worker) for _ in range(32)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert client.init_calls == [DSN]
        assert len(client.events) == 32

    def test_failed_initialization_raises(self, client_factory: Any) -> None:
        client = client_factory(return_handle=False)
        router = EventRouter(RouterConfig(dsn=DSN), client)

        with pytest.raises(ClientInitializationError):
            router.route(make_event(logging.ERROR))
        with pytest.raises(ClientInitializationError):
            router.route(make_event(logging.ERROR))

        assert client.init_calls == [DSN]
        assert client.events == []

    def test_closed_router_ignores_events(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.ERROR))
        handle = router.handle

        router.close()
        router.close()
        router.route(make_event(logging.ERROR))

        assert router.closed is True
        assert recording_client.closed_handles == [handle]
        assert handle is not None
        assert handle.closed is True
        assert len(recording_client.events) == 1

    def test_close_during_routing_drops_event(self, recording_client: Any, mocker: Any) -> None:
        router = EventRouter(RouterConfig(dsn=DSN), recording_client)

        def close_then_report_disabled() -> bool:
            router.close()
            return False

        mocker.patch.object(recording_client, "is_enabled", side_effect=close_then_report_disabled)

        router.route(make_event(logging.ERROR))

        assert recording_client.init_calls == []
        assert recording_client.events == []
        assert recording_client.breadcrumbs == []

    def test_context_manager_closes(self, recording_client: Any) -> None:
        with EventRouter(RouterConfig(dsn=DSN), recording_client) as router:
            router.route(make_event(logging.DEBUG))

        assert router.closed is True
        assert len(recording_client.closed_handles) == 1


@pytest.mark.unit
class TestBuildEvent:
    def test_event_fields(self, router: EventRouter, recording_client: Any) -> None:
        router.route(
            make_event(
                logging.ERROR,
                properties={"path": "/x", "blank": "  ", "logging:secret": "s", "count": 3},
                location=LocationInfo(module="io", file_name="/app/io.py", line_number=7, function="write"),
                thread_name="worker-1",
                domain="MainProcess",
            )
        )

        (event,) = recording_client.events
        assert event.message == "disk full"
        assert event.level == "error"
        assert event.logger == "svc.io"
        assert event.exception is None
        assert event.user is None
        assert event.environment is None
        assert event.sdk["name"] == __sdk_name__
        assert event.sdk["version"] == __version__
        assert list(event.extra) == [
            "path",
            "count",
            "location.module",
            "location.file",
            "location.line",
            "location.function",
            "thread_name",
            "process_name",
            "logging.level",
        ]
        assert event.extra["count"] == 3
        assert event.extra["location.line"] == 7
        assert event.extra["logging.level"] == "ERROR"

    def test_extra_never_holds_blank_values(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.ERROR, properties={"a": "", "b": " \t", "c": None}, thread_name=" "))

        (event,) = recording_client.events
        assert all(not (isinstance(value, str) and not value.strip()) for value in event.extra.values())
        assert "a" not in event.extra
        assert "thread_name" not in event.extra

    def test_blank_message_is_omitted(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.ERROR, rendered_message="   "))

        (event,) = recording_client.events
        assert event.message is None
        assert "message" not in event.to_payload()

    def test_attached_exception_is_sent(self, router: EventRouter, recording_client: Any) -> None:
        error = OSError("disk full")
        router.route(make_event(logging.ERROR, exception=error))

        assert recording_client.events[0].exception is error

    def test_logged_exception_is_sent_as_exception(self, router: EventRouter, recording_client: Any) -> None:
        error = ValueError("bad value")
        router.route(make_event(logging.ERROR, payload=ErrorPayload(error)))

        assert recording_client.events[0].exception is error

    def test_attached_exception_wins_over_logged_one(self, router: EventRouter, recording_client: Any) -> None:
        attached = OSError("attached")
        router.route(make_event(logging.ERROR, exception=attached, payload=ErrorPayload(ValueError("logged"))))

        assert recording_client.events[0].exception is attached

    def test_other_object_is_not_an_exception(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.ERROR, payload=OtherPayload({"a": 1})))

        assert recording_client.events[0].exception is None

    def test_identity_is_sent_only_when_enabled(self, client_factory: Any) -> None:
        hidden = client_factory()
        EventRouter(RouterConfig(dsn=DSN), hidden).route(make_event(identity="alice"))
        shown = client_factory()
        EventRouter(RouterConfig(dsn=DSN, send_identity=True), shown).route(make_event(identity="alice"))

        assert hidden.events[0].user is None
        assert shown.events[0].user == {"id": "alice"}

    def test_blank_identity_is_not_sent(self, client_factory: Any) -> None:
        client = client_factory()
        EventRouter(RouterConfig(dsn=DSN, send_identity=True), client).route(make_event(identity=" "))

        assert client.events[0].user is None

    def test_environment_is_stamped(self, client_factory: Any) -> None:
        client = client_factory()
        EventRouter(RouterConfig(dsn=DSN, environment="staging"), client).route(make_event())

        assert client.events[0].environment == "staging"

    @pytest.mark.parametrize(
        ("level", "severity"),
        [(logging.CRITICAL, "fatal"), (logging.ERROR, "error"), (45, "error"), (None, "info")],
    )
    def test_severity(self, client_factory: Any, level: int | None, severity: str) -> None:
        client = client_factory()
        router = EventRouter(RouterConfig(dsn=DSN, minimum_breadcrumb_level=-1), client)

        router.route(make_event(level))

        assert client.events[0].level == severity


@pytest.mark.unit
class TestBuildBreadcrumb:
    def test_breadcrumb_fields(self, router: EventRouter, recording_client: Any) -> None:
        router.route(
            make_event(
                logging.INFO,
                rendered_message="opening file",
                properties={"path": "/x", "count": 3, "logging:secret": "s"},
                location=LocationInfo(line_number=7),
            )
        )

        (crumb,) = recording_client.breadcrumbs
        assert crumb == {
            "message": "opening file",
            "category": "svc.io",
            "type": "",
            "level": "info",
            "data": {"path": "/x", "count": "3", "location.line": "7", "logging.level": "INFO"},
        }

    @pytest.mark.parametrize("rendered_message", [None, "", "   "])
    def test_blank_message_is_empty_string(
        self, router: EventRouter, recording_client: Any, rendered_message: str | None
    ) -> None:
        router.route(make_event(logging.DEBUG, rendered_message=rendered_message))

        assert recording_client.breadcrumbs[0]["message"] == ""
        assert recording_client.breadcrumbs[0]["level"] == "debug"

    def test_breadcrumb_data_are_strings(self, router: EventRouter, recording_client: Any) -> None:
        router.route(make_event(logging.WARNING, properties={"n": 1, "f": 2.5, "flag": True, "obj": object()}))

        data = recording_client.breadcrumbs[0]["data"]
        assert all(isinstance(value, str) for value in data.values())
        assert data["flag"] == "True"

    def test_custom_reserved_prefix(self, client_factory: Any) -> None:
        client = client_factory()
        router = EventRouter(RouterConfig(dsn=DSN, reserved_prefix="_"), client)

        router.route(make_event(logging.INFO, properties={"_private": "x", "logging:kept": "y"}))

        assert client.breadcrumbs[0]["data"] == {"logging:kept": "y", "logging.level": "INFO"}
