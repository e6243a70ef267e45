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

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_home() -> Path:
    return Path.home().resolve() / ".sandman"


class SandmanConfig(BaseSettings):
    """
    Configuration for sandman.

    `home` is the directory under which every managed sandbox lives. It is
    threaded explicitly through the entry points so tests can point it at a
    temporary directory.
    """

    home: Path = Field(default_factory=_default_home)
    cabal_executable: str = "cabal"
    sandbox_config_name: str = "cabal.sandbox.config"

    log_level: str = "INFO"
    log_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="SANDMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def sandboxes_directory(self) -> Path:
        """Path to the directory which holds the sandboxes."""
        return self.home / "sandboxes"

    @field_validator("home")
    @classmethod
    def _absolute_home(cls, value: Path) -> Path:
        # Package databases record canonical paths.
        return value.expanduser().resolve()
