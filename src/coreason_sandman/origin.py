# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

from pathlib import Path, PurePath

from coreason_sandman.models import InstalledPackage


def path_segments(path: PurePath | str) -> tuple[str, ...]:
    return PurePath(path).parts


def is_path_under(root: PurePath | str, path: PurePath | str) -> bool:
    """Segment-wise prefix test.

    ``/home/u/.sandman2/x`` is not under ``/home/u/.sandman`` even though the
    strings share a prefix.
    """
    root_parts = path_segments(root)
    return path_segments(path)[: len(root_parts)] == root_parts


def is_mixed_in(managed_root: Path, package: InstalledPackage) -> bool:
    """Whether a package's build artifacts live under the managed root.

    Known limitation: a package installed directly into managed sandbox X and
    one mixed into X from managed sandbox Y look the same, so running clean
    inside a managed sandbox sweeps its own packages too.
    """
    return any(is_path_under(managed_root, p) for p in package.origin_paths)
