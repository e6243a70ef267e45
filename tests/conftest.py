from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from loguru import logger

from coreason_sandman.config import SandmanConfig
from coreason_sandman.models import InstalledPackage
from coreason_sandman.package_manager import PackageManager
from coreason_sandman.sandman import Sandman

DB_DIR_NAME = "x86_64-linux-ghc-7.10.3-packages.conf.d"


def write_package(db_root: Path, identity: str, lib_root: Path) -> Path:
    """Write a package description whose artifacts live under ``lib_root``."""
    name = identity.rsplit("-", 1)[0]
    conf = db_root / f"{identity}.conf"
    conf.write_text(
        f"name: {name}\n"
        f"id: {identity}\n"
        f"import-dirs: {lib_root / identity}\n"
        f"library-dirs: {lib_root / identity}\n"
        f"haddock-interfaces: {lib_root / 'doc' / identity / (name + '.haddock')}\n",
        encoding="utf-8",
    )
    return conf


def make_project(root: Path) -> Path:
    """Create a project with a sandbox config and an empty package DB. Returns the DB path."""
    db_root = root / ".cabal-sandbox" / DB_DIR_NAME
    db_root.mkdir(parents=True)
    (root / "cabal.sandbox.config").write_text(
        "-- This is a cabal sandbox config\n"
        "inherit: /home/user/.cabal/config\n"
        "\n"
        "package-db: " + str(db_root) + "\n"
        "\n"
        "install-dirs\n"
        "  prefix: " + str(root / ".cabal-sandbox") + "\n",
        encoding="utf-8",
    )
    return db_root


@pytest.fixture(autouse=True)
def reset_logger() -> Generator[None, None, None]:
    yield
    logger.remove()


@pytest.fixture
def make_package() -> Callable[..., InstalledPackage]:
    def _make(identity: str, lib_root: str = "/usr/lib/ghc") -> InstalledPackage:
        return InstalledPackage(
            identity=identity,
            info_path=Path("/db") / f"{identity}.conf",
            import_dirs=(Path(lib_root) / identity,),
            library_dirs=(Path(lib_root) / identity,),
        )

    return _make


@pytest.fixture
def sandman_home(tmp_path: Path) -> Path:
    home = tmp_path / ".sandman"
    home.mkdir()
    return home


@pytest.fixture
def config(sandman_home: Path) -> SandmanConfig:
    return SandmanConfig(home=sandman_home)


@pytest.fixture
def package_manager() -> Any:
    return MagicMock(spec=PackageManager)


@pytest.fixture
def sandman(config: SandmanConfig, package_manager: Any) -> Sandman:
    return Sandman(config, package_manager=package_manager)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    make_project(root)
    return root


@pytest.fixture
def project_db(project: Path) -> Path:
    return project / ".cabal-sandbox" / DB_DIR_NAME


@pytest.fixture
def managed_sandbox(sandman_home: Path) -> Callable[..., Path]:
    """Create a managed sandbox on disk holding the given package identities."""

    def _create(name: str, identities: list[str]) -> Path:
        root = sandman_home / "sandboxes" / name
        root.mkdir(parents=True)
        db_root = make_project(root)
        lib_root = root / ".cabal-sandbox" / "lib"
        for identity in identities:
            write_package(db_root, identity, lib_root)
        return root

    return _create
