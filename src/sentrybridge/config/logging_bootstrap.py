# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

import structlog
from structlog.processors import (
    StackInfoRenderer,
    TimeStamper,
    UnicodeDecoder,
)
from structlog.stdlib import (
    add_log_level,
    add_logger_name,
)


def bootstrap_logging() -> None:
    """
    Configure a minimal structlog setup that can be used immediately
    before the full application configuration is loaded.
    """
    if structlog.is_configured():
        return

    # --- Define processors used by structlog ---
    base_processors = [
        add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        StackInfoRenderer(),
        UnicodeDecoder(),
    ]

    # --- Configure structlog ---
    structlog.configure(
        processors=[*base_processors, structlog.dev.ConsoleRenderer()],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
