"""Tests for SimulatorConfig."""

import json
from pathlib import Path

from gitsim.models.config import SimulatorConfig


class TestSimulatorConfig:
    """Tests for loading and saving SimulatorConfig."""

    def test_defaults(self) -> None:
        """Test default seed values."""
        config = SimulatorConfig()

        assert config.repository_name == "my-project"
        assert config.seed_hash == "a1b2c3d"
        assert config.git_config["user.name"] == "Git User"
        assert config.aliases["st"] == "status"

    def test_load_missing_file(self, temp_dir: Path) -> None:
        """Test loading a missing file gives defaults."""
        config = SimulatorConfig.load(temp_dir / "missing.json")

        assert config == SimulatorConfig()

    def test_save_and_load(self, temp_dir: Path) -> None:
        """Test a saved config loads back unchanged."""
        path = temp_dir / "config.json"
        config = SimulatorConfig(repository_name="demo", untracked_files=["a.txt"])
        config.git_config["user.name"] = "Ada"

        config.save(path)
        loaded = SimulatorConfig.load(path)

        assert loaded == config

    def test_partial_file_merges_defaults(self, temp_dir: Path) -> None:
        """Test missing sections and keys fall back to defaults."""
        path = temp_dir / "config.json"
        path.write_text(json.dumps({
            "repository": {"name": "partial"},
            "git_config": {"user.name": "Ada"},
            "aliases": {"lg": "log"},
        }))

        config = SimulatorConfig.load(path)

        assert config.repository_name == "partial"
        assert config.default_branch == "main"
        assert config.git_config["user.name"] == "Ada"
        assert config.git_config["user.email"] == "user@example.com"
        assert config.aliases["lg"] == "log"
        assert config.aliases["co"] == "checkout"

    def test_malformed_file(self, temp_dir: Path) -> None:
        """Test a malformed file gives defaults."""
        path = temp_dir / "config.json"
        path.write_text("{not json")

        assert SimulatorConfig.load(path) == SimulatorConfig()
