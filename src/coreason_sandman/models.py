# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman


from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Sandbox(BaseModel):
    """A managed sandbox.

    Attributes:
        root: Path to the sandbox root. For managed sandboxes this is also the
            project root holding the sandbox configuration file.
    """

    model_config = ConfigDict(frozen=True)

    root: Path

    @property
    def name(self) -> str:
        return self.root.name


class InstalledPackage(BaseModel):
    """One entry of a package database.

    Attributes:
        identity: Opaque unique identifier assigned by the package database
            (name, version and build hash).
        info_path: The package description file inside the database.
        import_dirs: Directories holding the package's interface files.
        library_dirs: Directories holding the package's libraries.
        haddock_interfaces: Documentation interface files.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    info_path: Path
    import_dirs: tuple[Path, ...] = ()
    library_dirs: tuple[Path, ...] = ()
    haddock_interfaces: tuple[Path, ...] = ()

    @property
    def artifact_paths(self) -> tuple[Path, ...]:
        """Every on-disk path owned by the package, metadata file first."""
        return (self.info_path, *self.import_dirs, *self.library_dirs, *self.haddock_interfaces)

    @property
    def origin_paths(self) -> tuple[Path, ...]:
        """Paths that reveal where the package was built.

        The description file is excluded: after a mix it lives in the target
        database regardless of where the package came from.
        """
        return (*self.import_dirs, *self.library_dirs, *self.haddock_interfaces)


class PackageDb(BaseModel):
    """A package database and its installed packages, in database order."""

    model_config = ConfigDict(frozen=True)

    root: Path
    packages: tuple[InstalledPackage, ...] = ()

    @property
    def package_count(self) -> int:
        return len(self.packages)

    @property
    def identities(self) -> list[str]:
        return [package.identity for package in self.packages]


class TransferMode(str, Enum):
    MIX = "mix"
    CLEAN = "clean"


class MixPlan(BaseModel):
    """Packages to copy into, or remove from, a target database.

    Attributes:
        mode: Whether the plan copies (mix) or deletes (clean).
        target_root: Root directory of the target package database.
        packages: The records to process, in order.
    """

    model_config = ConfigDict(frozen=True)

    mode: TransferMode
    target_root: Path
    packages: tuple[InstalledPackage, ...] = Field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.packages

    def __len__(self) -> int:
        return len(self.packages)


class TransferReport(BaseModel):
    """Outcome of applying a MixPlan."""

    mode: TransferMode
    processed: list[Path] = Field(default_factory=list)
    recached: bool = False
