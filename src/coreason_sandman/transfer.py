# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

import shutil
from pathlib import Path

from loguru import logger

from coreason_sandman.exceptions import CopyFailedError, DeleteFailedError
from coreason_sandman.models import MixPlan, TransferMode, TransferReport
from coreason_sandman.package_manager import PackageManager


def apply_plan(plan: MixPlan, package_manager: PackageManager, project_root: Path) -> TransferReport:
    """Execute a MixPlan and rebuild the target database's cache.

    In mix mode each package description is copied into the target database
    under its own file name. In clean mode it is deleted. Processing stops at
    the first failure; files handled before it stay as they are and the
    cache is not rebuilt.

    Args:
        plan: The plan to execute.
        package_manager: Used for the cache rebuild.
        project_root: Working directory for the cache rebuild.

    Returns:
        TransferReport: The files written or removed.

    Raises:
        CopyFailedError: If a description could not be copied.
        DeleteFailedError: If a description could not be deleted.
        ExternalToolError: If the cache rebuild fails.
    """
    report = TransferReport(mode=plan.mode)
    if plan.is_empty:
        return report

    for package in plan.packages:
        source = package.info_path
        if plan.mode is TransferMode.MIX:
            destination = plan.target_root / source.name
            logger.debug(f"Copying {source} to {destination}")
            try:
                shutil.copy2(source, destination)
            except OSError as e:
                logger.error(f"Failed to copy {source}: {e}")
                raise CopyFailedError(source, len(report.processed), e) from e
            report.processed.append(destination)
        else:
            logger.debug(f"Removing {source}")
            try:
                source.unlink()
            except OSError as e:
                logger.error(f"Failed to remove {source}: {e}")
                raise DeleteFailedError(source, len(report.processed), e) from e
            report.processed.append(source)

    logger.info("Rebuilding package cache.")
    package_manager.recache(project_root)
    report.recached = True
    return report
