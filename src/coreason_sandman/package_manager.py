# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

from coreason_sandman.exceptions import ExternalToolError

# Conventional shell status for "command not found".
COMMAND_NOT_FOUND = 127


@runtime_checkable
class PackageManager(Protocol):
    """
    Operations sandman delegates to the external package manager.
    """

    def init_sandbox(self, root: Path) -> None:
        """Initialize a new isolated environment rooted at ``root``."""
        ...

    def install(self, root: Path, packages: list[str]) -> None:
        """Install ``packages`` into the environment rooted at ``root``."""
        ...

    def recache(self, project_root: Path) -> None:
        """Rebuild the query cache of the project's package database."""
        ...


class CabalPackageManager:
    """PackageManager backed by the ``cabal`` executable.

    Commands inherit the terminal so the user sees cabal's own output. No
    timeout is applied.
    """

    def __init__(self, executable: str = "cabal"):
        self.executable = executable

    def _run(self, args: list[str], cwd: Path) -> None:
        cmd = [self.executable, *args]
        logger.debug(f"Running {' '.join(cmd)} in {cwd}")
        try:
            completed = subprocess.run(cmd, cwd=cwd, check=False)
        except FileNotFoundError as e:
            logger.error(f"Executable not found: {self.executable}")
            raise ExternalToolError(cmd, COMMAND_NOT_FOUND, f"Executable not found: {self.executable}") from e

        if completed.returncode != 0:
            logger.error(f"{' '.join(cmd)} exited with status {completed.returncode}")
            raise ExternalToolError(cmd, completed.returncode)

    def init_sandbox(self, root: Path) -> None:
        self._run(["sandbox", "init", "--sandbox=."], cwd=root)

    def install(self, root: Path, packages: list[str]) -> None:
        if not packages:
            raise ValueError("At least one package is required")
        self._run(["install", *packages], cwd=root)

    def recache(self, project_root: Path) -> None:
        self._run(["sandbox", "hc-pkg", "recache"], cwd=project_root)
