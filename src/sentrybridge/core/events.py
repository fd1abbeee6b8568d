# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Value types flowing through the bridge.

A `LogEvent` is the framework-neutral view of one log call. It is built from a
standard library `logging.LogRecord` (`LogEvent.from_record`) or from a
`structlog` event dict (`LogEvent.from_event_dict`) and is never modified
afterwards.

The router turns a `LogEvent` into either a `TelemetryEvent` (a full Sentry
event) or a `Breadcrumb`. Both are built once, handed to the telemetry client
and discarded.

Whatever object was logged in place of a message string is carried as a tagged
payload:

- `NoPayload`: the message was a plain string.
- `ErrorPayload`: an exception instance was logged as the message.
- `OtherPayload`: any other object was logged as the message.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final, Union

from sentrybridge.core.levels import level_name, parse_level

# Attributes every LogRecord carries; anything else was passed through `extra=`.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Keys structlog processors add that are not user context.
_STRUCTLOG_KEYS: Final[frozenset[str]] = frozenset(
    {
        "event",
        "level",
        "log_level",
        "logger",
        "logger_name",
        "timestamp",
        "exc_info",
        "exception",
        "stack_info",
        "stack",
        "_record",
        "_from_structlog",
    }
)

# Keys added by structlog.processors.CallsiteParameterAdder.
_CALLSITE_KEYS: Final[frozenset[str]] = frozenset(
    {"module", "pathname", "filename", "lineno", "func_name", "thread", "thread_name", "process", "process_name"}
)

# Attributes structlog.stdlib.ProcessorFormatter.wrap_for_formatter puts on a record.
_WRAPPED_RECORD_ATTRS: Final[frozenset[str]] = frozenset({"_logger", "_name"})

IDENTITY_KEY: Final[str] = "identity"


@dataclass(frozen=True)
class NoPayload:
    """The log call carried a plain message string."""


@dataclass(frozen=True)
class ErrorPayload:
    """An exception instance was logged in place of a message."""

    error: BaseException


@dataclass(frozen=True)
class OtherPayload:
    """An arbitrary object was logged in place of a message."""

    value: Any


Payload = Union[NoPayload, ErrorPayload, OtherPayload]


@dataclass(frozen=True)
class LocationInfo:
    """Call-site of a log call. Every field is optional and may be malformed."""

    module: str | None = None
    file_name: str | None = None
    line_number: int | str | None = None
    function: str | None = None


@dataclass(frozen=True)
class LogEvent:
    """
    One log call as seen by the router.

    Attributes
    ----------
    level : int | None
        The `logging` level number; larger is more severe.
    level_name : str | None
        Display name of the level (``"WARNING"``).
    rendered_message : str | None
        The fully formatted message.
    exception : BaseException | None
        The exception attached through ``exc_info``.
    payload : Payload
        The object logged in place of a message string, if any.
    logger_name : str | None
        Name of the emitting logger.
    properties : Mapping[str, Any] | None
        Custom context passed with the log call.
    location : LocationInfo | None
        Call-site information.
    thread_name : str | None
        Name of the emitting thread.
    domain : str | None
        Name of the emitting process.
    identity : str | None
        Identity of the caller, forwarded as Sentry user id when enabled.

    """

    level: int | None = None
    level_name: str | None = None
    rendered_message: str | None = None
    exception: BaseException | None = None
    payload: Payload = field(default_factory=NoPayload)
    logger_name: str | None = None
    properties: Mapping[str, Any] | None = None
    location: LocationInfo | None = None
    thread_name: str | None = None
    domain: str | None = None
    identity: str | None = None

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> LogEvent:
        """
        Build a `LogEvent` from a standard library log record.

        Records produced by `structlog.stdlib.ProcessorFormatter.wrap_for_formatter`
        carry the structlog event dict as ``record.msg``; its message and context
        are unpacked so both logging styles produce the same event.
        """
        extras = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        identity = extras.pop(IDENTITY_KEY, None)
        exception = _exception_from_exc_info(record.exc_info)

        if isinstance(record.msg, dict) and _WRAPPED_RECORD_ATTRS.issubset(extras):
            event_dict = record.msg
            for key in _WRAPPED_RECORD_ATTRS:
                extras.pop(key)
            properties = {**_event_dict_properties(event_dict), **extras}
            if identity is None:
                identity = event_dict.get(IDENTITY_KEY)
            if exception is None:
                exception = _exception_from_exc_info(event_dict.get("exc_info"))
            message = event_dict.get("event")
            rendered_message = message if isinstance(message, str) else _render(message)
            payload = _payload_for(message)
        else:
            properties = extras
            rendered_message = _render_record(record)
            payload = _payload_for(record.msg)

        return cls(
            level=record.levelno,
            level_name=record.levelname,
            rendered_message=rendered_message,
            exception=exception,
            payload=payload,
            logger_name=record.name,
            properties=properties,
            location=LocationInfo(
                module=record.module,
                file_name=record.pathname,
                line_number=record.lineno,
                function=record.funcName,
            ),
            thread_name=record.threadName,
            domain=record.processName,
            identity=_as_identity(identity),
        )

    @classmethod
    def from_event_dict(cls, logger_name: str | None, method_name: str, event_dict: Mapping[str, Any]) -> LogEvent:
        """
        Build a `LogEvent` from a structlog event dict.

        Args:
        ----
            logger_name (str | None): Name of the wrapped logger, used when the
                                      event dict has no ``logger`` key.
            method_name (str): The structlog method that was called (``"warning"``).
            event_dict (Mapping[str, Any]): The event dict at this point of the chain.

        Returns:
        -------
            LogEvent: The converted event.

        """
        level = _level_from(event_dict.get("level") or event_dict.get("log_level") or method_name)
        message = event_dict.get("event")

        location = None
        if not {"module", "pathname", "lineno", "func_name"}.isdisjoint(event_dict):
            location = LocationInfo(
                module=event_dict.get("module"),
                file_name=event_dict.get("pathname"),
                line_number=event_dict.get("lineno"),
                function=event_dict.get("func_name"),
            )

        return cls(
            level=level,
            level_name=_level_display_name(level),
            rendered_message=message if isinstance(message, str) else _render(message),
            exception=_exception_from_exc_info(event_dict.get("exc_info")),
            payload=_payload_for(message),
            logger_name=event_dict.get("logger") or event_dict.get("logger_name") or logger_name,
            properties=_event_dict_properties(event_dict),
            location=location,
            thread_name=event_dict.get("thread_name"),
            domain=event_dict.get("process_name"),
            identity=_as_identity(event_dict.get(IDENTITY_KEY)),
        )


@dataclass
class TelemetryEvent:
    """
    A full Sentry event, built once and handed to the telemetry client.

    `extra` is a dict, so its keys are unique; the property extraction that fills
    it never yields blank string values.
    """

    exception: BaseException | None = None
    message: str | None = None
    level: str | None = None
    logger: str | None = None
    environment: str | None = None
    user: dict[str, str] | None = None
    sdk: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Render the Sentry event dict, leaving out fields that are not set."""
        payload: dict[str, Any] = {}
        if self.message is not None:
            payload["message"] = self.message
        if self.level is not None:
            payload["level"] = self.level
        if self.logger is not None:
            payload["logger"] = self.logger
        if self.environment is not None:
            payload["environment"] = self.environment
        if self.user is not None:
            payload["user"] = dict(self.user)
        if self.sdk:
            payload["sdk"] = self.sdk
        if self.extra:
            payload["extra"] = dict(self.extra)
        return payload


@dataclass
class Breadcrumb:
    """A Sentry breadcrumb; `message` is never None."""

    message: str = ""
    category: str | None = None
    type: str = ""
    level: str = "info"
    data: dict[str, str] = field(default_factory=dict)


# --- private helpers ---


def _payload_for(message: Any) -> Payload:
    if message is None or isinstance(message, str):
        return NoPayload()
    if isinstance(message, BaseException):
        return ErrorPayload(message)
    return OtherPayload(message)


def _exception_from_exc_info(exc_info: Any) -> BaseException | None:
    if exc_info is None or exc_info is False:
        return None
    if isinstance(exc_info, BaseException):
        return exc_info
    if exc_info is True:
        exc_info = sys.exc_info()
    if isinstance(exc_info, tuple) and len(exc_info) == 3 and isinstance(exc_info[1], BaseException):
        return exc_info[1]
    return None


def _render(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _render_record(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except (TypeError, ValueError):
        # Arguments that do not match the format string.
        return str(record.msg)


def _level_from(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return parse_level(value)
    except ValueError:
        return None


def _level_display_name(level: int | None) -> str | None:
    if level is None:
        return None
    return level_name(level)


def _event_dict_properties(event_dict: Mapping[str, Any]) -> dict[str, Any]:
    excluded = _STRUCTLOG_KEYS | _CALLSITE_KEYS | {IDENTITY_KEY}
    return {key: value for key, value in event_dict.items() if key not in excluded}


def _as_identity(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
