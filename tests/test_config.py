"""Unit tests for Config (scaffoldkit.config).

Tests cover:
- Defaults and field validation
- save/load round trip
- from_env with every recognised variable
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from scaffoldkit.config import DEFAULT_NODE_MANAGERS, Config


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        cfg = Config()
        assert cfg.install_dependencies is True
        assert cfg.node_package_managers == ["pnpm", "yarn", "npm"]
        assert cfg.commit_message == "Initial commit"
        assert cfg.license_holder == ""
        assert cfg.tool_timeout is None
        assert cfg.git_binary == "git"

    @pytest.mark.unit
    def test_default_managers_not_shared(self):
        cfg = Config()
        cfg.node_package_managers.append("bun")
        assert DEFAULT_NODE_MANAGERS == ["pnpm", "yarn", "npm"]
        assert Config().node_package_managers == ["pnpm", "yarn", "npm"]

    @pytest.mark.unit
    def test_empty_manager_list_rejected(self):
        with pytest.raises(ValidationError):
            Config(node_package_managers=[])

    @pytest.mark.unit
    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            Config(tool_timeout=0)

    @pytest.mark.unit
    def test_empty_commit_message_rejected(self):
        with pytest.raises(ValidationError):
            Config(commit_message="")


class TestConfigSaveLoad:
    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        cfg = Config(
            install_dependencies=False,
            node_package_managers=["npm"],
            license_holder="Acme",
            tool_timeout=120,
        )
        path = cfg.save(tmp_path / "nested" / "scaffold.json")

        assert path.exists()
        assert json.loads(path.read_text())["license_holder"] == "Acme"
        assert Config.load(path) == cfg

    @pytest.mark.unit
    def test_load_invalid(self, tmp_path: Path):
        path = tmp_path / "scaffold.json"
        path.write_text(json.dumps({"tool_timeout": -5}))
        with pytest.raises(ValidationError):
            Config.load(path)


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_variables(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_all_variables(self):
        env = {
            "SCAFFOLD_INSTALL_DEPENDENCIES": "no",
            "SCAFFOLD_NODE_MANAGERS": " npm , yarn ,",
            "SCAFFOLD_COMMIT_MESSAGE": "chore: scaffold",
            "SCAFFOLD_LICENSE_HOLDER": "Acme Corp",
            "SCAFFOLD_TOOL_TIMEOUT": "90",
            "SCAFFOLD_GIT_BINARY": "/opt/git/bin/git",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = Config.from_env()

        assert cfg.install_dependencies is False
        assert cfg.node_package_managers == ["npm", "yarn"]
        assert cfg.commit_message == "chore: scaffold"
        assert cfg.license_holder == "Acme Corp"
        assert cfg.tool_timeout == 90.0
        assert cfg.git_binary == "/opt/git/bin/git"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy_install_flag(self, value):
        with patch.dict(os.environ, {"SCAFFOLD_INSTALL_DEPENDENCIES": value}, clear=True):
            assert Config.from_env().install_dependencies is True

    @pytest.mark.unit
    def test_blank_manager_list_keeps_default(self):
        with patch.dict(os.environ, {"SCAFFOLD_NODE_MANAGERS": " , "}, clear=True):
            assert Config.from_env().node_package_managers == DEFAULT_NODE_MANAGERS

    @pytest.mark.unit
    def test_bad_timeout(self):
        with patch.dict(os.environ, {"SCAFFOLD_TOOL_TIMEOUT": "soon"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()
