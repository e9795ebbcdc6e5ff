"""Commit, Tag and StashEntry data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Commit:
    """Represents a simulated commit snapshot."""

    hash: str
    message: str
    author: str
    files: list[str] = field(default_factory=list)
    parent_hash: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    is_merge: bool = False
    merged_from: str | None = None

    @property
    def subject(self) -> str:
        """Return the first line of the message."""
        return self.message.split("\n", 1)[0]

    @property
    def date(self) -> str:
        """Return the commit date in the short log format."""
        return self.timestamp.strftime("%a %b %d %Y")

    def copy(self) -> "Commit":
        """Return an independent copy of this commit."""
        return Commit(
            hash=self.hash,
            message=self.message,
            author=self.author,
            files=list(self.files),
            parent_hash=self.parent_hash,
            timestamp=self.timestamp,
            is_merge=self.is_merge,
            merged_from=self.merged_from,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "hash": self.hash,
            "message": self.message,
            "author": self.author,
            "timestamp": self.timestamp.isoformat(),
            "files": list(self.files),
            "parent": self.parent_hash,
        }
        if self.is_merge:
            data["is_merge"] = True
            data["merged_from"] = self.merged_from
        return data


@dataclass
class Tag:
    """A named pointer at a commit, optionally annotated."""

    commit_hash: str
    message: str
    tagger: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_annotated(self) -> bool:
        return bool(self.message)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "commit": self.commit_hash,
            "message": self.message,
            "tagger": self.tagger,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class StashEntry:
    """Pending changes saved by ``git stash``."""

    message: str
    modified_files: list[str] = field(default_factory=list)
    staged_files: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "message": self.message,
            "modified_files": list(self.modified_files),
            "staged_files": list(self.staged_files),
            "timestamp": self.timestamp.isoformat(),
        }
