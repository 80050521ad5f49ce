# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Remove expired sessions and sessions whose user no longer exists.

Usage: python -m campusdesk.scripts.sweep_sessions
"""

from __future__ import annotations

from campusdesk.infrastructure.container import container
from campusdesk.infrastructure.db import init_db
from campusdesk.shared.logging import logger, setup_logging


def main() -> None:
    setup_logging()
    init_db()
    removed = container.session_manager.sweep()
    logger.info(f"sweep_sessions: removed {removed} session(s)")


if __name__ == "__main__":
    main()
