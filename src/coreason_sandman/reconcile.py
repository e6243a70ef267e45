# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

"""Identity-keyed reconciliation of package databases.

Both functions are pure: they only build a MixPlan for the transfer step.
"""

from pathlib import Path

from coreason_sandman.models import MixPlan, PackageDb, TransferMode
from coreason_sandman.origin import is_mixed_in


def compute_mix_plan(source: PackageDb, target: PackageDb) -> MixPlan:
    """Packages of ``source`` whose identity is absent from ``target``.

    Source order is preserved and each identity appears at most once. No
    version resolution takes place: only identities are compared.
    """
    satisfied = {package.identity for package in target.packages}
    to_mix = []
    for package in source.packages:
        if package.identity in satisfied:
            continue
        satisfied.add(package.identity)
        to_mix.append(package)
    return MixPlan(mode=TransferMode.MIX, target_root=target.root, packages=tuple(to_mix))


def compute_clean_plan(managed_root: Path, target: PackageDb) -> MixPlan:
    """Packages of ``target`` that were mixed in from a managed sandbox."""
    mixed = tuple(package for package in target.packages if is_mixed_in(managed_root, package))
    return MixPlan(mode=TransferMode.CLEAN, target_root=target.root, packages=mixed)
