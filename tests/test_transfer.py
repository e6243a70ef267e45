# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from conftest import write_package

from coreason_sandman.exceptions import CopyFailedError, DeleteFailedError, ExternalToolError
from coreason_sandman.models import InstalledPackage, MixPlan, TransferMode
from coreason_sandman.package_db import parse_package_description
from coreason_sandman.transfer import apply_plan


@pytest.fixture
def source_packages(tmp_path: Path) -> list[InstalledPackage]:
    db = tmp_path / "sandbox-db"
    db.mkdir()
    return [parse_package_description(write_package(db, i, tmp_path / "lib")) for i in ("a-1", "b-1", "c-1")]


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    root = tmp_path / "project-db"
    root.mkdir()
    return root


def test_mix_copies_descriptions_and_recaches(
    source_packages: list[InstalledPackage], target_root: Path, package_manager: Any, tmp_path: Path
) -> None:
    plan = MixPlan(mode=TransferMode.MIX, target_root=target_root, packages=tuple(source_packages))

    report = apply_plan(plan, package_manager, tmp_path)

    assert sorted(p.name for p in target_root.iterdir()) == ["a-1.conf", "b-1.conf", "c-1.conf"]
    assert (target_root / "a-1.conf").read_text() == source_packages[0].info_path.read_text()
    assert report.processed == [target_root / "a-1.conf", target_root / "b-1.conf", target_root / "c-1.conf"]
    assert report.recached
    package_manager.recache.assert_called_once_with(tmp_path)


def test_clean_deletes_descriptions_and_recaches(
    source_packages: list[InstalledPackage], package_manager: Any, tmp_path: Path
) -> None:
    plan = MixPlan(mode=TransferMode.CLEAN, target_root=tmp_path / "sandbox-db", packages=tuple(source_packages[:2]))

    report = apply_plan(plan, package_manager, tmp_path)

    assert not source_packages[0].info_path.exists()
    assert not source_packages[1].info_path.exists()
    assert source_packages[2].info_path.exists()
    assert report.mode is TransferMode.CLEAN
    assert len(report.processed) == 2
    package_manager.recache.assert_called_once_with(tmp_path)


def test_empty_plan_does_nothing(target_root: Path, package_manager: Any, tmp_path: Path) -> None:
    report = apply_plan(MixPlan(mode=TransferMode.MIX, target_root=target_root), package_manager, tmp_path)
    assert report.processed == []
    assert not report.recached
    package_manager.recache.assert_not_called()


def test_copy_failure_keeps_partial_result(
    source_packages: list[InstalledPackage], target_root: Path, package_manager: Any, tmp_path: Path
) -> None:
    source_packages[1].info_path.unlink()
    plan = MixPlan(mode=TransferMode.MIX, target_root=target_root, packages=tuple(source_packages))

    with pytest.raises(CopyFailedError) as excinfo:
        apply_plan(plan, package_manager, tmp_path)

    assert excinfo.value.path == source_packages[1].info_path
    assert excinfo.value.completed == 1
    assert [p.name for p in target_root.iterdir()] == ["a-1.conf"]
    package_manager.recache.assert_not_called()


def test_delete_failure_keeps_partial_result(
    source_packages: list[InstalledPackage], package_manager: Any, tmp_path: Path
) -> None:
    plan = MixPlan(mode=TransferMode.CLEAN, target_root=tmp_path, packages=tuple(source_packages))
    real_unlink = Path.unlink

    def flaky_unlink(self: Path, missing_ok: bool = False) -> None:
        if self.name == "b-1.conf":
            raise PermissionError(13, "Permission denied")
        real_unlink(self, missing_ok=missing_ok)

    with patch.object(Path, "unlink", flaky_unlink):
        with pytest.raises(DeleteFailedError) as excinfo:
            apply_plan(plan, package_manager, tmp_path)

    assert excinfo.value.completed == 1
    assert "Permission denied" in str(excinfo.value)
    assert not source_packages[0].info_path.exists()
    assert source_packages[1].info_path.exists()
    assert source_packages[2].info_path.exists()
    package_manager.recache.assert_not_called()


def test_recache_failure_propagates(
    source_packages: list[InstalledPackage], target_root: Path, package_manager: Any, tmp_path: Path
) -> None:
    package_manager.recache.side_effect = ExternalToolError(["cabal", "sandbox", "hc-pkg", "recache"], 2)
    plan = MixPlan(mode=TransferMode.MIX, target_root=target_root, packages=tuple(source_packages[:1]))

    with pytest.raises(ExternalToolError) as excinfo:
        apply_plan(plan, package_manager, tmp_path)

    assert excinfo.value.exit_code == 2
    assert (target_root / "a-1.conf").exists()
