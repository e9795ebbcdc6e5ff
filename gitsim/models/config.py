"""Simulator configuration management."""

import json
from dataclasses import dataclass, field
from pathlib import Path


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".config" / "gitsim"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main configuration file path."""
    return get_config_dir() / "config.json"


def _default_git_config() -> dict[str, str]:
    return {
        "user.name": "Git User",
        "user.email": "user@example.com",
        "core.editor": "nano",
        "init.defaultBranch": "main",
    }


def _default_aliases() -> dict[str, str]:
    return {"st": "status", "co": "checkout", "br": "branch", "ci": "commit"}


@dataclass
class SimulatorConfig:
    """Seed values for a freshly created simulated repository."""

    # Repository
    repository_name: str = "my-project"
    default_branch: str = "main"
    initialized: bool = True

    # Seed commit
    seed_hash: str = "a1b2c3d"
    seed_message: str = "Initial commit"
    seed_author: str = "User <user@example.com>"
    seed_files: list[str] = field(default_factory=lambda: ["README.md", ".gitignore"])

    # Working tree
    untracked_files: list[str] = field(
        default_factory=lambda: ["index.html", "style.css"]
    )

    # Remote
    origin_url: str = "https://github.com/user/my-project.git"

    # git config / aliases
    git_config: dict[str, str] = field(default_factory=_default_git_config)
    aliases: dict[str, str] = field(default_factory=_default_aliases)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        config_file = path or get_config_file()
        with open(config_file, "w") as f:
            json.dump(self._to_dict(), f, indent=2)

    def _to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "repository": {
                "name": self.repository_name,
                "default_branch": self.default_branch,
                "initialized": self.initialized,
            },
            "seed": {
                "hash": self.seed_hash,
                "message": self.seed_message,
                "author": self.seed_author,
                "files": self.seed_files,
                "untracked": self.untracked_files,
            },
            "remote": {
                "origin_url": self.origin_url,
            },
            "git_config": self.git_config,
            "aliases": self.aliases,
        }

    @classmethod
    def load(cls, path: Path | None = None) -> "SimulatorConfig":
        """Load configuration from file, falling back to defaults."""
        config_file = path or get_config_file()
        if not config_file.exists():
            return cls()

        try:
            with open(config_file) as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, AttributeError):
            return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "SimulatorConfig":
        """Create from dictionary."""
        repository = data.get("repository", {})
        seed = data.get("seed", {})
        remote = data.get("remote", {})
        defaults = cls()

        return cls(
            repository_name=repository.get("name", defaults.repository_name),
            default_branch=repository.get("default_branch", defaults.default_branch),
            initialized=repository.get("initialized", defaults.initialized),
            seed_hash=seed.get("hash", defaults.seed_hash),
            seed_message=seed.get("message", defaults.seed_message),
            seed_author=seed.get("author", defaults.seed_author),
            seed_files=seed.get("files", defaults.seed_files),
            untracked_files=seed.get("untracked", defaults.untracked_files),
            origin_url=remote.get("origin_url", defaults.origin_url),
            git_config={**defaults.git_config, **data.get("git_config", {})},
            aliases={**defaults.aliases, **data.get("aliases", {})},
        )
