# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

"""
coreason-sandman
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import SandmanConfig
from .exceptions import (
    ConfigNotFoundError,
    CopyFailedError,
    DeleteFailedError,
    ExternalToolError,
    InvalidSandboxNameError,
    PackageDbUndeterminedError,
    PackageRecordError,
    SandboxAlreadyExistsError,
    SandboxNotFoundError,
    SandmanError,
    SandmanFileSystemError,
)
from .models import InstalledPackage, MixPlan, PackageDb, Sandbox, TransferMode, TransferReport
from .origin import is_mixed_in
from .package_db import PackageDbReader, determine_package_db, locate_package_db, read_package_descriptions
from .package_manager import CabalPackageManager, PackageManager
from .reconcile import compute_clean_plan, compute_mix_plan
from .sandman import Sandman
from .transfer import apply_plan

__all__ = [
    "CabalPackageManager",
    "ConfigNotFoundError",
    "CopyFailedError",
    "DeleteFailedError",
    "ExternalToolError",
    "InvalidSandboxNameError",
    "InstalledPackage",
    "MixPlan",
    "PackageDb",
    "PackageDbReader",
    "PackageDbUndeterminedError",
    "PackageManager",
    "PackageRecordError",
    "Sandbox",
    "SandboxAlreadyExistsError",
    "SandboxNotFoundError",
    "Sandman",
    "SandmanConfig",
    "SandmanError",
    "SandmanFileSystemError",
    "TransferMode",
    "TransferReport",
    "apply_plan",
    "compute_clean_plan",
    "compute_mix_plan",
    "determine_package_db",
    "is_mixed_in",
    "locate_package_db",
    "read_package_descriptions",
]
