# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Unit tests for the extraction of structured context from log events.

Covers ordering, filtering of blank and reserved properties, call-site
handling and the laziness of the returned sequence.
"""

from __future__ import annotations

import logging
import types

import pytest

from sentrybridge.core.events import LocationInfo, LogEvent
from sentrybridge.core.properties import extract_properties


@pytest.mark.unit
class TestCustomProperties:
    def test_blank_string_values_are_dropped(self) -> None:
        event = LogEvent(properties={"foo": "   ", "bar": "", "tab": "\t\n"})
        assert list(extract_properties(event)) == []

    def test_non_blank_string_is_kept(self) -> None:
        event = LogEvent(properties={"foo": "bar"})
        assert list(extract_properties(event)) == [("foo", "bar")]

    def test_none_values_are_dropped(self) -> None:
        event = LogEvent(properties={"foo": None})
        assert list(extract_properties(event)) == []

    def test_non_string_values_are_never_filtered_by_content(self) -> None:
        event = LogEvent(properties={"zero": 0, "empty_list": [], "false": False})
        assert list(extract_properties(event)) == [("zero", 0), ("empty_list", []), ("false", False)]

    @pytest.mark.parametrize("key", ["logging:Foo", "LOGGING:foo", "Logging:HostName"])
    def test_reserved_prefix_is_excluded_case_insensitively(self, key: str) -> None:
        event = LogEvent(properties={key: "value", "kept": "yes"})
        assert list(extract_properties(event)) == [("kept", "yes")]

    def test_custom_reserved_prefix(self) -> None:
        event = LogEvent(properties={"log4net:Foo": "x", "logging:Foo": "y"})
        assert list(extract_properties(event, reserved_prefix="log4net:")) == [("logging:Foo", "y")]

    def test_blank_keys_are_skipped(self) -> None:
        event = LogEvent(properties={" ": "x", "": "y", "ok": "z"})
        assert list(extract_properties(event)) == [("ok", "z")]

    def test_mapping_order_is_preserved(self) -> None:
        event = LogEvent(properties={"b": 1, "a": 2, "c": 3})
        assert [key for key, _ in extract_properties(event)] == ["b", "a", "c"]

    def test_missing_property_bag(self) -> None:
        assert list(extract_properties(LogEvent(properties=None))) == []


@pytest.mark.unit
class TestLocationAndContext:
    def test_full_ordering(self) -> None:
        event = LogEvent(
            level=logging.ERROR,
            level_name="ERROR",
            properties={"path": "/x"},
            location=LocationInfo(module="io", file_name="/app/io.py", line_number="42", function="write"),
            thread_name="worker-1",
            domain="MainProcess",
        )

        assert list(extract_properties(event)) == [
            ("path", "/x"),
            ("location.module", "io"),
            ("location.file", "/app/io.py"),
            ("location.line", 42),
            ("location.function", "write"),
            ("thread_name", "worker-1"),
            ("process_name", "MainProcess"),
            ("logging.level", "ERROR"),
        ]

    @pytest.mark.parametrize("line_number", ["abc", "0", 0, None, "", "4.2"])
    def test_unusable_line_numbers_are_omitted(self, line_number: object) -> None:
        event = LogEvent(location=LocationInfo(line_number=line_number))  # type: ignore[arg-type]
        assert list(extract_properties(event)) == []

    def test_empty_location_fields_are_omitted(self) -> None:
        event = LogEvent(location=LocationInfo(module="", file_name=None, line_number=7, function=""))
        assert list(extract_properties(event)) == [("location.line", 7)]

    def test_level_name_falls_back_to_logging_name(self) -> None:
        event = LogEvent(level=logging.WARNING)
        assert list(extract_properties(event)) == [("logging.level", "WARNING")]

    def test_no_level_means_no_level_pair(self) -> None:
        event = LogEvent(thread_name="", domain="")
        assert list(extract_properties(event)) == []


@pytest.mark.unit
class TestLaziness:
    def test_result_is_a_generator(self) -> None:
        result = extract_properties(LogEvent(properties={"a": 1}))
        assert isinstance(result, types.GeneratorType)

    def test_generator_is_exhausted_after_one_pass(self) -> None:
        result = extract_properties(LogEvent(properties={"a": 1}))
        assert list(result) == [("a", 1)]
        assert list(result) == []

    def test_re_extraction_is_idempotent(self) -> None:
        event = LogEvent(level=logging.INFO, properties={"a": 1, "b": "x"}, thread_name="t")
        assert list(extract_properties(event)) == list(extract_properties(event))
