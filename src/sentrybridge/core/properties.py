# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Extract structured context from a `LogEvent`.

`extract_properties` yields the key/value pairs attached to a Sentry event as
extras, or to a breadcrumb as data, in a fixed order:

1. Custom properties, in the order the mapping provides them.
2. Call-site: ``location.module``, ``location.file``, ``location.line`` and
   ``location.function``.
3. ``thread_name``.
4. ``process_name``, the execution domain of the event.
5. ``logging.level`` with the display name of the level.

Dotted keys and the ``*_name`` keys are kept apart from custom context by
convention; pairs are never de-duplicated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from sentrybridge.core.levels import level_name

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sentrybridge.core.events import LogEvent

RESERVED_PREFIX: Final[str] = "logging:"

MODULE_KEY: Final[str] = "location.module"
FILE_KEY: Final[str] = "location.file"
LINE_KEY: Final[str] = "location.line"
FUNCTION_KEY: Final[str] = "location.function"
THREAD_KEY: Final[str] = "thread_name"
DOMAIN_KEY: Final[str] = "process_name"
LEVEL_KEY: Final[str] = "logging.level"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _parse_line_number(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        line_number = int(value)
    except (TypeError, ValueError):
        return None
    return line_number or None


def extract_properties(event: LogEvent, reserved_prefix: str = RESERVED_PREFIX) -> Iterator[tuple[str, Any]]:
    """
    Yield the context of a log event as ``(key, value)`` pairs.

    The result is a generator: consume it once and call again to re-extract.
    Extraction never raises for missing or malformed optional fields.

    Args:
    ----
        event (LogEvent): The event to read.
        reserved_prefix (str): Custom keys starting with this prefix
                               (case-insensitive) are internal and skipped.

    Yields:
    ------
        tuple[str, Any]: The next key and value.

    """
    reserved = reserved_prefix.casefold()

    if event.properties is not None:
        for key, value in event.properties.items():
            if not isinstance(key, str) or _is_blank(key):
                continue
            if reserved and key.casefold().startswith(reserved):
                continue
            if value is None:
                continue
            if isinstance(value, str) and _is_blank(value):
                continue
            yield key, value

    location = event.location
    if location is not None:
        if not _is_blank(location.module):
            yield MODULE_KEY, location.module
        if not _is_blank(location.file_name):
            yield FILE_KEY, location.file_name
        line_number = _parse_line_number(location.line_number)
        if line_number is not None:
            yield LINE_KEY, line_number
        if not _is_blank(location.function):
            yield FUNCTION_KEY, location.function

    if not _is_blank(event.thread_name):
        yield THREAD_KEY, event.thread_name

    if not _is_blank(event.domain):
        yield DOMAIN_KEY, event.domain

    if event.level is not None:
        yield LEVEL_KEY, level_name(event.level) if _is_blank(event.level_name) else event.level_name
