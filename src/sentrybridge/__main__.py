# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert
#

"""Main entry point for SentryBridge."""

from sentrybridge.cli.main import main

if __name__ == "__main__":
    main()
