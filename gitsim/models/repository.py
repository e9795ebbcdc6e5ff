"""Repository, Branch and Remote data models."""

from dataclasses import dataclass, field

from .commit import Commit, StashEntry, Tag
from .config import SimulatorConfig

PENDING_SETS = ("staged_files", "modified_files", "deleted_files", "untracked_files")


@dataclass
class Branch:
    """Represents a branch: an independent, append-only list of commits."""

    name: str
    commits: list[Commit] = field(default_factory=list)
    head: str | None = None

    @property
    def head_commit(self) -> "Commit | None":
        """Return the latest commit, if any."""
        return self.commits[-1] if self.commits else None

    @property
    def commit_hashes(self) -> set[str]:
        return {c.hash for c in self.commits}

    def append(self, commit: Commit) -> None:
        """Append a commit and advance head to it."""
        self.commits.append(commit)
        self.head = commit.hash

    def replace_commits(self, commits: list[Commit]) -> None:
        """Replace the whole commit list, keeping head on the last entry."""
        self.commits = commits
        self.head = commits[-1].hash if commits else None

    def find_commit(self, prefix: str) -> "Commit | None":
        """Return the first commit whose hash starts with prefix."""
        for commit in self.commits:
            if commit.hash.startswith(prefix):
                return commit
        return None

    def fork(self, name: str) -> "Branch":
        """Create a new branch owning copies of this branch's commits."""
        return Branch(
            name=name,
            commits=[c.copy() for c in self.commits],
            head=self.head,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "head": self.head,
            "commits": [c.to_dict() for c in self.commits],
        }


@dataclass
class Remote:
    """A simulated remote and the last pushed hash per branch."""

    url: str
    branches: dict[str, str | None] = field(default_factory=dict)

    def upstream(self, branch: str) -> str | None:
        """Return the recorded hash for branch, if it has an upstream."""
        return self.branches.get(branch)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"url": self.url, "branches": dict(self.branches)}


@dataclass
class Repository:
    """Represents the complete state of one simulated repository."""

    repository_name: str = "my-project"
    is_initialized: bool = True
    current_branch_name: str = "main"
    branches: dict[str, Branch] = field(default_factory=dict)

    working_directory: list[str] = field(default_factory=list)
    untracked_files: list[str] = field(default_factory=list)
    modified_files: list[str] = field(default_factory=list)
    staged_files: list[str] = field(default_factory=list)
    deleted_files: list[str] = field(default_factory=list)

    stash: list[StashEntry] = field(default_factory=list)
    tags: dict[str, Tag] = field(default_factory=dict)
    remotes: dict[str, Remote] = field(default_factory=dict)
    config: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, config: SimulatorConfig | None = None) -> "Repository":
        """Create a repository with a single branch holding the seed commit."""
        config = config or SimulatorConfig()
        seed = Commit(
            hash=config.seed_hash,
            message=config.seed_message,
            author=config.seed_author,
            files=list(config.seed_files),
        )
        main = Branch(name=config.default_branch)
        main.append(seed)

        working = list(config.seed_files)
        untracked = []
        for path in config.untracked_files:
            if path not in working:
                working.append(path)
                untracked.append(path)

        return cls(
            repository_name=config.repository_name,
            is_initialized=config.initialized,
            current_branch_name=main.name,
            branches={main.name: main},
            working_directory=working,
            untracked_files=untracked,
            remotes={
                "origin": Remote(
                    url=config.origin_url,
                    branches={main.name: seed.hash, "develop": None},
                )
            },
            config=dict(config.git_config),
            aliases=dict(config.aliases),
        )

    @property
    def current_branch(self) -> Branch:
        """Return the checked-out branch."""
        return self.branches[self.current_branch_name]

    def get_branch(self, name: str) -> Branch | None:
        """Find branch by name."""
        return self.branches.get(name)

    @property
    def author(self) -> str:
        """Return the configured identity as ``name <email>``."""
        return f"{self.config.get('user.name', '')} <{self.config.get('user.email', '')}>"

    def all_hashes(self) -> set[str]:
        """Return every commit hash known to any branch."""
        hashes: set[str] = set()
        for branch in self.branches.values():
            hashes |= branch.commit_hashes
        return hashes

    # Pending file sets

    @property
    def has_uncommitted_changes(self) -> bool:
        return bool(self.modified_files or self.staged_files)

    @property
    def is_clean(self) -> bool:
        return not any(getattr(self, name) for name in PENDING_SETS)

    def discard_pending(self, path: str) -> None:
        """Remove path from every pending set."""
        for name in PENDING_SETS:
            files = getattr(self, name)
            if path in files:
                files.remove(path)

    def stage(self, path: str) -> None:
        """Move a path into the staging area."""
        self.discard_pending(path)
        self.staged_files.append(path)

    def pending_overlaps(self) -> set[str]:
        """Return paths that appear in more than one pending set."""
        seen: set[str] = set()
        overlaps: set[str] = set()
        for name in PENDING_SETS:
            for path in set(getattr(self, name)):
                if path in seen:
                    overlaps.add(path)
                seen.add(path)
        return overlaps

    def reset_working_directory(self, files: list[str]) -> None:
        self.working_directory = list(files)

    # Working tree edits made outside of git

    def create_file(self, path: str) -> bool:
        """Create a new untracked file."""
        if not path or path in self.working_directory:
            return False
        self.working_directory.append(path)
        self.discard_pending(path)
        self.untracked_files.append(path)
        return True

    def modify_file(self, path: str) -> bool:
        """Mark an existing file as modified."""
        if path not in self.working_directory:
            return False
        if path in self.modified_files or path in self.staged_files:
            return False
        self.discard_pending(path)
        self.modified_files.append(path)
        return True

    def delete_file(self, path: str) -> bool:
        """Remove a file from the working tree."""
        if path not in self.working_directory:
            return False
        self.working_directory.remove(path)
        self.discard_pending(path)
        self.deleted_files.append(path)
        return True

    def to_dict(self) -> dict:
        """Return a JSON-compatible snapshot of the whole state."""
        return {
            "repository_name": self.repository_name,
            "is_initialized": self.is_initialized,
            "current_branch": self.current_branch_name,
            "branches": {name: b.to_dict() for name, b in self.branches.items()},
            "working_directory": list(self.working_directory),
            "untracked_files": list(self.untracked_files),
            "modified_files": list(self.modified_files),
            "staged_files": list(self.staged_files),
            "deleted_files": list(self.deleted_files),
            "stash": [s.to_dict() for s in self.stash],
            "tags": {name: t.to_dict() for name, t in self.tags.items()},
            "remotes": {name: r.to_dict() for name, r in self.remotes.items()},
            "config": dict(self.config),
            "aliases": dict(self.aliases),
        }
