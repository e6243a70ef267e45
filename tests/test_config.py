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
from unittest.mock import patch

from coreason_sandman.config import SandmanConfig


def test_defaults() -> None:
    with patch.dict("os.environ", {}, clear=True):
        config = SandmanConfig()
        expected_home = Path.home().resolve() / ".sandman"
    assert config.home == expected_home
    assert config.sandboxes_directory == config.home / "sandboxes"
    assert config.cabal_executable == "cabal"
    assert config.sandbox_config_name == "cabal.sandbox.config"
    assert config.log_file is None


def test_environment_overrides(tmp_path: Path) -> None:
    env = {
        "SANDMAN_HOME": str(tmp_path / "home"),
        "SANDMAN_CABAL_EXECUTABLE": "/opt/cabal/bin/cabal",
        "SANDMAN_LOG_LEVEL": "DEBUG",
    }
    with patch.dict("os.environ", env, clear=True):
        config = SandmanConfig()
    assert config.home == (tmp_path / "home").resolve()
    assert config.cabal_executable == "/opt/cabal/bin/cabal"
    assert config.log_level == "DEBUG"


def test_home_is_made_absolute(tmp_path: Path) -> None:
    with patch.dict("os.environ", {"HOME": str(tmp_path)}):
        config = SandmanConfig(home=Path("~/elsewhere"))
    assert config.home == (tmp_path / "elsewhere").resolve()
    assert config.home.is_absolute()
