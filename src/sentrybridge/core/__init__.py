# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""Routing of log events to Sentry."""

from sentrybridge.core.client import ClientHandle, SentryClient, TelemetryClient
from sentrybridge.core.events import (
    Breadcrumb,
    ErrorPayload,
    LocationInfo,
    LogEvent,
    NoPayload,
    OtherPayload,
    TelemetryEvent,
)
from sentrybridge.core.initializer import LazyClientInitializer
from sentrybridge.core.properties import extract_properties
from sentrybridge.core.router import EventRouter, RouterConfig

__all__ = [
    "Breadcrumb",
    "ClientHandle",
    "ErrorPayload",
    "EventRouter",
    "LazyClientInitializer",
    "LocationInfo",
    "LogEvent",
    "NoPayload",
    "OtherPayload",
    "RouterConfig",
    "SentryClient",
    "TelemetryClient",
    "TelemetryEvent",
    "extract_properties",
]
