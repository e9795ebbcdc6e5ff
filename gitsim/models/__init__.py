"""Data models for gitsim."""

from .commit import Commit, StashEntry, Tag
from .config import SimulatorConfig
from .repository import Branch, Remote, Repository
from .session import Session

__all__ = [
    "Commit",
    "StashEntry",
    "Tag",
    "Branch",
    "Remote",
    "Repository",
    "Session",
    "SimulatorConfig",
]
