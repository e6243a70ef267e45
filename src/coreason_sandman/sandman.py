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
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from coreason_sandman.config import SandmanConfig
from coreason_sandman.exceptions import (
    ExternalToolError,
    InvalidSandboxNameError,
    SandboxAlreadyExistsError,
    SandboxNotFoundError,
    SandmanError,
    SandmanFileSystemError,
)
from coreason_sandman.models import MixPlan, PackageDb, Sandbox, TransferReport
from coreason_sandman.package_db import PackageDbReader, determine_package_db, read_package_descriptions
from coreason_sandman.package_manager import CabalPackageManager, PackageManager
from coreason_sandman.reconcile import compute_clean_plan, compute_mix_plan
from coreason_sandman.transfer import apply_plan


@dataclass
class SandboxSummary:
    name: str
    package_count: int | None = None
    error: str | None = None


def validate_sandbox_name(name: str) -> str:
    """Reject names that would escape the sandboxes directory."""
    if not name or name in {".", ".."} or "/" in name or "\\" in name or "\0" in name:
        raise InvalidSandboxNameError(name)
    return name


class Sandman:
    """Manages the sandboxes under one sandman home and mixes them into projects.

    The package manager and the package database reader are injectable so the
    reconciliation logic can run without a real toolchain.
    """

    def __init__(
        self,
        config: SandmanConfig | None = None,
        package_manager: PackageManager | None = None,
        reader: PackageDbReader = read_package_descriptions,
    ):
        self.config = config or SandmanConfig()
        self.package_manager = package_manager or CabalPackageManager(self.config.cabal_executable)
        self.reader = reader

    @property
    def sandboxes_directory(self) -> Path:
        return self.config.sandboxes_directory

    def _sandbox_dir(self, name: str) -> Path:
        return self.sandboxes_directory / validate_sandbox_name(name)

    def get_sandboxes(self) -> list[Sandbox]:
        """All managed sandboxes, sorted by name."""
        if not self.sandboxes_directory.is_dir():
            return []
        try:
            entries = sorted(self.sandboxes_directory.iterdir())
        except OSError as e:
            raise SandmanFileSystemError(self.sandboxes_directory, "list", e) from e
        return [Sandbox(root=p) for p in entries if p.is_dir()]

    def get_sandbox(self, name: str) -> Sandbox | None:
        sandbox_dir = self._sandbox_dir(name)
        if sandbox_dir.is_dir():
            return Sandbox(root=sandbox_dir)
        return None

    def require_sandbox(self, name: str) -> Sandbox:
        sandbox = self.get_sandbox(name)
        if sandbox is None:
            raise SandboxNotFoundError(name)
        return sandbox

    def package_db(self, project_root: Path) -> PackageDb:
        return determine_package_db(project_root, self.config.sandbox_config_name, self.reader)

    def create_sandbox(self, name: str) -> Sandbox:
        """Create a new managed sandbox with the given name.

        Raises:
            SandboxAlreadyExistsError: If the sandbox directory exists.
            ExternalToolError: If provisioning fails. The new directory is
                removed again.
            SandmanFileSystemError: If the sandbox directory cannot be created.
        """
        sandbox_dir = self._sandbox_dir(name)
        if sandbox_dir.exists():
            raise SandboxAlreadyExistsError(name)

        try:
            sandbox_dir.mkdir(parents=True)
        except OSError as e:
            raise SandmanFileSystemError(sandbox_dir, "create", e) from e
        logger.info(f"Provisioning sandbox {name} at {sandbox_dir}")
        try:
            self.package_manager.init_sandbox(sandbox_dir)
        except ExternalToolError:
            logger.error(f"Failed to create sandbox {name}")
            shutil.rmtree(sandbox_dir, ignore_errors=True)
            raise
        return Sandbox(root=sandbox_dir)

    def destroy_sandbox(self, name: str) -> Sandbox:
        sandbox = self.require_sandbox(name)
        logger.info(f"Removing sandbox {name} at {sandbox.root}")
        try:
            shutil.rmtree(sandbox.root)
        except OSError as e:
            raise SandmanFileSystemError(sandbox.root, "remove", e) from e
        return sandbox

    def install_packages(self, name: str, packages: list[str]) -> None:
        sandbox = self.require_sandbox(name)
        logger.info(f"Installing {', '.join(packages)} into sandbox {name}")
        self.package_manager.install(sandbox.root, packages)

    def sandbox_summaries(self) -> list[SandboxSummary]:
        """Name and package count of every sandbox.

        A sandbox whose package database cannot be read is reported with an
        error instead of aborting the listing.
        """
        summaries = []
        for sandbox in self.get_sandboxes():
            try:
                db = self.package_db(sandbox.root)
            except SandmanError as e:
                logger.warning(str(e))
                summaries.append(SandboxSummary(name=sandbox.name, error=str(e)))
                continue
            summaries.append(SandboxSummary(name=sandbox.name, package_count=db.package_count))
        return summaries

    def list_packages(self, name: str) -> list[str]:
        sandbox = self.require_sandbox(name)
        return self.package_db(sandbox.root).identities

    def plan_mix(self, name: str, project_root: Path) -> MixPlan:
        """Packages of sandbox ``name`` missing from the project's database."""
        target = self.package_db(project_root)
        sandbox = self.require_sandbox(name)
        source = self.package_db(sandbox.root)
        return compute_mix_plan(source, target)

    def plan_clean(self, project_root: Path) -> MixPlan:
        """Packages of the project's database that came from a managed sandbox."""
        target = self.package_db(project_root)
        return compute_clean_plan(self.config.home, target)

    def apply(self, plan: MixPlan, project_root: Path) -> TransferReport:
        return apply_plan(plan, self.package_manager, project_root)

    def mix(self, name: str, project_root: Path) -> TransferReport:
        return self.apply(self.plan_mix(name, project_root), project_root)

    def clean(self, project_root: Path) -> TransferReport:
        return self.apply(self.plan_clean(project_root), project_root)
