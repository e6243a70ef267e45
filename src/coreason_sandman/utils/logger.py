# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

import sys
from pathlib import Path

from loguru import logger

__all__ = ["configure_logging", "logger"]


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure the loguru sinks used by sandman.

    Args:
        level: Minimum level for the stderr sink.
        log_file: Optional path of a JSON log file. Its directory is created
            if missing.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{level: <8}</level> | {message}",
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            serialize=True,
            enqueue=True,
        )
