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


class SandmanError(Exception):
    """Base exception for all sandman failures."""


class ConfigNotFoundError(SandmanError):
    """Raised when a project's sandbox configuration file is missing or unreadable."""

    def __init__(self, path: Path, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"Sandbox config not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class PackageDbUndeterminedError(SandmanError):
    """Raised when the sandbox configuration has no package-db declaration."""

    def __init__(self, project_root: Path, reason: str | None = None):
        self.project_root = project_root
        self.reason = reason
        message = f"Could not determine package DB for {project_root}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PackageRecordError(SandmanError):
    """Raised when a package description file cannot be parsed."""

    def __init__(self, path: Path, message: str, lineno: int | None = None):
        self.path = path
        self.lineno = lineno
        loc = f" (line {lineno})" if lineno is not None else ""
        super().__init__(f"Invalid package description in {path}: {message}{loc}")


class SandboxNotFoundError(SandmanError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Sandbox {name} does not exist.")


class SandboxAlreadyExistsError(SandmanError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Sandbox {name} already exists.")


class ExternalToolError(SandmanError):
    """Raised when the external package manager exits with a non-zero status.

    The exit code is kept so the CLI can forward it unmodified.
    """

    def __init__(self, command: list[str], exit_code: int, message: str | None = None):
        self.command = command
        self.exit_code = exit_code
        super().__init__(message or f"Command {' '.join(command)!r} failed with exit code {exit_code}")


class TransferError(SandmanError):
    """Base class for per-artifact failures during mix or clean.

    Attributes:
        path: The artifact that could not be processed.
        completed: How many records were processed before the failure.
            Those changes are left in place.
    """

    action = "process"

    def __init__(self, path: Path, completed: int, cause: OSError):
        self.path = path
        self.completed = completed
        self.cause = cause
        super().__init__(
            f"Failed to {self.action} {path}: {cause.strerror or cause}"
            f" ({completed} package(s) already processed)"
        )


class CopyFailedError(TransferError):
    action = "copy"


class DeleteFailedError(TransferError):
    action = "delete"


class InvalidSandboxNameError(SandmanError, ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid sandbox name: {name!r}")


class SandmanFileSystemError(SandmanError):
    """Raised when a sandbox or package DB directory cannot be created, listed or removed."""

    def __init__(self, path: Path, action: str, cause: OSError):
        self.path = path
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause.strerror or cause}")
