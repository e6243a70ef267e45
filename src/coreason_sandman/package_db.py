# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

"""Locating and enumerating package databases."""

import shlex
from collections.abc import Callable, Iterable
from pathlib import Path

from loguru import logger

from coreason_sandman.exceptions import (
    ConfigNotFoundError,
    PackageDbUndeterminedError,
    PackageRecordError,
    SandmanFileSystemError,
)
from coreason_sandman.models import InstalledPackage, PackageDb

PACKAGE_DB_KEY = "package-db:"
PACKAGE_DESCRIPTION_SUFFIX = ".conf"

# Identity fields, most specific first. Older package databases only carry
# installed-package-id.
IDENTITY_FIELDS = ("id", "installed-package-id", "key")

PackageDbReader = Callable[[Path], list[InstalledPackage]]


def locate_package_db(project_root: Path, config_name: str = "cabal.sandbox.config") -> Path:
    """Read the package database path declared by a project's sandbox config.

    Only the first line starting with ``package-db:`` is honored. Relative
    values are resolved against the project root.

    Args:
        project_root: The directory containing the sandbox configuration.
        config_name: Filename of the sandbox configuration.

    Returns:
        Path: The resolved package database directory.

    Raises:
        ConfigNotFoundError: If the configuration file is missing or unreadable.
        PackageDbUndeterminedError: If no package-db line is present.
    """
    config_path = project_root / config_name
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError(config_path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigNotFoundError(config_path, str(e)) from e

    for line in text.splitlines():
        if not line.startswith(PACKAGE_DB_KEY):
            continue
        value = line.split(":", 1)[1].strip(" \t").rstrip()
        if not value:
            raise PackageDbUndeterminedError(project_root, f"empty {PACKAGE_DB_KEY} value in {config_path}")
        db_path = Path(value).expanduser()
        if not db_path.is_absolute():
            db_path = project_root / db_path
        return db_path.resolve()

    raise PackageDbUndeterminedError(project_root)


def parse_fields(text: str, path: Path) -> dict[str, str]:
    """Split a package description into its fields.

    Field names are case-insensitive. Indented lines continue the previous
    field.
    """
    fields: dict[str, str] = {}
    current: str | None = None
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.startswith("--"):
            continue
        if line[0] in " \t":
            if current is None:
                raise PackageRecordError(path, "continuation line before any field", lineno)
            fields[current] = f"{fields[current]}\n{line.strip()}".strip()
            continue
        name, sep, value = line.partition(":")
        if not sep:
            raise PackageRecordError(path, f"expected 'field: value', got {line!r}", lineno)
        current = name.strip().lower()
        fields[current] = value.strip()
    return fields


def split_list_field(value: str) -> list[str]:
    """Split a list-valued field on whitespace and commas, honoring double quotes."""
    lexer = shlex.shlex(value, posix=True)
    lexer.whitespace = " \t\r\n,"
    lexer.whitespace_split = True
    lexer.quotes = '"'
    lexer.escape = ""
    lexer.commenters = ""
    return list(lexer)


def _expand_path(raw: str, pkgroot: Path) -> Path:
    for var in ("${pkgroot}", "$topdir"):
        if raw.startswith(var):
            return pkgroot / raw[len(var) :].lstrip("/\\")
    return Path(raw)


def parse_package_description(path: Path) -> InstalledPackage:
    """Parse one package description file of a package database.

    Args:
        path: The ``.conf`` file inside the database directory.

    Returns:
        InstalledPackage: The parsed record.

    Raises:
        PackageRecordError: If the file is unreadable or malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PackageRecordError(path, str(e)) from e

    fields = parse_fields(text, path)
    identity = next((fields[f] for f in IDENTITY_FIELDS if fields.get(f)), path.stem)
    pkgroot = path.parent.parent

    def paths(field: str) -> tuple[Path, ...]:
        try:
            values = split_list_field(fields.get(field, ""))
        except ValueError as e:
            raise PackageRecordError(path, f"{field}: {e}") from e
        return tuple(_expand_path(p, pkgroot) for p in values)

    return InstalledPackage(
        identity=identity,
        info_path=path,
        import_dirs=paths("import-dirs"),
        library_dirs=paths("library-dirs"),
        haddock_interfaces=paths("haddock-interfaces"),
    )


def read_package_descriptions(db_root: Path) -> list[InstalledPackage]:
    """Default PackageDbReader: parse every description file in sorted order.

    The binary query cache next to the descriptions is never consulted.
    """
    if not db_root.is_dir():
        raise PackageDbUndeterminedError(db_root, "directory does not exist")
    try:
        files = sorted(p for p in db_root.iterdir() if p.suffix == PACKAGE_DESCRIPTION_SUFFIX and p.is_file())
    except OSError as e:
        raise SandmanFileSystemError(db_root, "list", e) from e
    return [parse_package_description(p) for p in files]


def unique_by_identity(packages: Iterable[InstalledPackage]) -> list[InstalledPackage]:
    """Keep the first record of every identity, preserving order."""
    seen: set[str] = set()
    unique: list[InstalledPackage] = []
    for package in packages:
        if package.identity in seen:
            logger.debug(f"Ignoring duplicate package record {package.identity} at {package.info_path}")
            continue
        seen.add(package.identity)
        unique.append(package)
    return unique


def determine_package_db(
    project_root: Path,
    config_name: str = "cabal.sandbox.config",
    reader: PackageDbReader = read_package_descriptions,
) -> PackageDb:
    """Get the PackageDb for the project rooted at ``project_root``."""
    db_root = locate_package_db(project_root, config_name)
    packages = unique_by_identity(reader(db_root))
    logger.debug(f"Read {len(packages)} packages from {db_root}")
    return PackageDb(root=db_root, packages=tuple(packages))
