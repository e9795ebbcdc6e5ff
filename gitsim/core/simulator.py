"""Git command transitions over the in-memory repository model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

import logbook

from gitsim.models.commit import Commit, StashEntry, Tag
from gitsim.models.repository import Remote, Repository

from .utils import generate_hash

log = logbook.Logger(__name__)

DEFAULT_CLONE_URL = "https://github.com/user/example-repo.git"
CLONED_FILES = ["README.md", "package.json", "src/index.js"]
REPO_PATH = "/path/to/repo"

Prompt = Callable[[str, str], str | None]


class SimulatorError(Exception):
    """Raised when a command is rejected; the repository is left unchanged."""

    pass


class ResultKind(Enum):
    """How a command's output should be presented."""

    PLAIN = "plain"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CommandResult:
    """Text produced by a command and its classification."""

    text: str
    kind: ResultKind = ResultKind.PLAIN
    command: str = ""

    @classmethod
    def plain(cls, text: str) -> "CommandResult":
        return cls(text, ResultKind.PLAIN)

    @classmethod
    def success(cls, text: str) -> "CommandResult":
        return cls(text, ResultKind.SUCCESS)

    @classmethod
    def warning(cls, text: str) -> "CommandResult":
        return cls(text, ResultKind.WARNING)

    @classmethod
    def error(cls, text: str) -> "CommandResult":
        return cls(text, ResultKind.ERROR)

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR


def _indent(message: str) -> str:
    return "\n".join(f"    {line}" if line else "" for line in message.split("\n"))


class GitSimulator:
    """Implements each supported git command against a Repository.

    Every public method validates its preconditions first and raises
    SimulatorError before touching any state, so a rejected command never
    leaves a partial mutation behind.
    """

    def __init__(
        self,
        repository: Repository,
        prompt: Prompt | None = None,
        hash_factory: Callable[[set[str]], str] = generate_hash,
    ) -> None:
        self.repo = repository
        self.prompt = prompt
        self._hash_factory = hash_factory

    def _ask(self, question: str, default: str) -> str:
        """Ask the UI layer for a value, falling back to default."""
        if self.prompt is None:
            return default
        answer = self.prompt(question, default)
        return answer or default

    def _new_hash(self) -> str:
        return self._hash_factory(self.repo.all_hashes())

    def _new_commit(self, message: str, files: list[str], **kwargs) -> Commit:
        """Build a commit on top of the current head."""
        return Commit(
            hash=self._new_hash(),
            message=message,
            author=kwargs.pop("author", None) or self.repo.author,
            files=files,
            parent_hash=self.repo.current_branch.head,
            **kwargs,
        )

    # Repository setup

    def init(self) -> CommandResult:
        """Initialize the repository, or report that it already is."""
        if self.repo.is_initialized:
            return CommandResult.plain(
                f"Reinitialized existing Git repository in {REPO_PATH}/.git/"
            )
        self.repo.is_initialized = True
        return CommandResult.success(
            f"Initialized empty Git repository in {REPO_PATH}/.git/"
        )

    def clone(self, url: str | None = None) -> CommandResult:
        """Replace the working tree with a canned cloned project."""
        url = url or DEFAULT_CLONE_URL
        repo_name = url.rstrip("/").split("/")[-1].replace(".git", "")
        self.repo.repository_name = repo_name
        self.repo.reset_working_directory(CLONED_FILES)
        self.repo.untracked_files = []
        self.repo.modified_files = []
        self.repo.staged_files = []
        self.repo.deleted_files = []
        log.info("Cloned {} as {}", url, repo_name)

        return CommandResult.success(
            f"Cloning into '{repo_name}'...\n"
            "remote: Enumerating objects: 15, done.\n"
            "remote: Total 15 (delta 0), reused 0 (delta 0)\n"
            "Receiving objects: 100% (15/15), done."
        )

    def config(self, key: str | None = None, value: str | None = None) -> CommandResult:
        """List, read or write configuration values."""
        if key is None:
            lines = ["Git Configuration:"]
            lines.extend(f"{k}={v}" for k, v in self.repo.config.items())
            return CommandResult.plain("\n".join(lines))

        if value is None:
            current = self.repo.config.get(key)
            if not current:
                raise SimulatorError(f"No such configuration: {key}")
            return CommandResult.plain(current)

        self.repo.config[key] = value
        if key.startswith("alias.") and len(key) > len("alias."):
            self.repo.aliases[key[len("alias."):]] = value
        return CommandResult.success(f"Set {key} to {value}")

    # Recording changes

    def status(self) -> CommandResult:
        """Describe the branch and the pending file sets."""
        repo = self.repo
        branch = repo.current_branch
        lines = [f"On branch {branch.name}"]

        origin = repo.remotes.get("origin")
        remote_head = origin.upstream(branch.name) if origin else None
        if remote_head and remote_head != branch.head:
            lines.append(
                f"Your branch is ahead of 'origin/{branch.name}' by 1 commit."
            )
            lines.append('  (use "git push" to publish your local commits)')
            lines.append("")

        if repo.staged_files:
            lines.append("Changes to be committed:")
            lines.append('  (use "git reset HEAD <file>..." to unstage)')
            lines.extend(f"\tnew file:   {f}" for f in repo.staged_files)
            lines.append("")

        if repo.modified_files:
            lines.append("Changes not staged for commit:")
            lines.append('  (use "git add <file>..." to update what will be committed)')
            lines.append(
                '  (use "git checkout -- <file>..." to discard changes in working directory)'
            )
            lines.extend(f"\tmodified:   {f}" for f in repo.modified_files)
            lines.append("")

        if repo.deleted_files:
            lines.append("Changes not staged for commit:")
            lines.extend(f"\tdeleted:    {f}" for f in repo.deleted_files)
            lines.append("")

        if repo.untracked_files:
            lines.append("Untracked files:")
            lines.append(
                '  (use "git add <file>..." to include in what will be committed)'
            )
            lines.extend(f"\t{f}" for f in repo.untracked_files)
            lines.append("")

        if repo.is_clean:
            lines.append("nothing to commit, working tree clean")

        return CommandResult.plain("\n".join(lines).rstrip("\n"))

    def add_all(self) -> CommandResult:
        """Stage every modified and untracked path."""
        repo = self.repo
        pending = repo.modified_files + repo.untracked_files
        if not pending:
            return CommandResult.plain("No changes to add")

        for path in pending:
            repo.stage(path)
        return CommandResult.success("Changes staged for commit")

    def add_file(self, path: str) -> CommandResult:
        """Stage a single path."""
        repo = self.repo
        if path in repo.modified_files or path in repo.untracked_files:
            repo.stage(path)
            return CommandResult.success(f"Added {path} to staging area")
        if path in repo.working_directory:
            return CommandResult.plain(f"No changes to {path}")
        raise SimulatorError(f"pathspec '{path}' did not match any files")

    def commit(self, message: str | None = None) -> CommandResult:
        """Record the staged paths as a new commit on the current branch."""
        repo = self.repo
        if not repo.staged_files:
            return CommandResult.plain("nothing to commit, working tree clean")

        if message is None:
            message = self._ask("Enter commit message:", "Update files")

        commit = self._new_commit(message, list(repo.staged_files))
        branch = repo.current_branch
        branch.append(commit)
        repo.staged_files = []
        log.debug("Committed {} on {}", commit.hash, branch.name)

        return CommandResult.success(
            f"[{branch.name} {commit.hash}] {message}\n"
            f" {len(commit.files)} file(s) changed"
        )

    def amend(self, message: str | None = None) -> CommandResult:
        """Rewrite the latest commit in place, keeping its hash."""
        repo = self.repo
        branch = repo.current_branch
        last = branch.head_commit
        if last is None:
            raise SimulatorError("No commits to amend")

        if message is None:
            message = self._ask("Enter new commit message:", last.message)

        last.message = message
        for path in repo.staged_files:
            if path not in last.files:
                last.files.append(path)
        last.timestamp = datetime.now()
        repo.staged_files = []

        return CommandResult.success(f"[{branch.name} {last.hash}] {message}")

    def diff(self, staged: bool = False) -> CommandResult:
        """Show simulated hunks for modified or staged paths."""
        if staged:
            if not self.repo.staged_files:
                return CommandResult.plain("No changes staged for commit")
            blocks = [
                f"diff --git a/{f} b/{f}\n"
                "new file mode 100644\n"
                "index 0000000..abc123\n"
                "--- /dev/null\n"
                f"+++ b/{f}\n"
                "@@ -0,0 +1,3 @@\n"
                "+new file content\n"
                "+line 2\n"
                "+line 3\n"
                for f in self.repo.staged_files
            ]
        else:
            if not self.repo.modified_files:
                return CommandResult.plain("No changes in working directory")
            blocks = [
                f"diff --git a/{f} b/{f}\n"
                "index abc123..def456 100644\n"
                f"--- a/{f}\n"
                f"+++ b/{f}\n"
                "@@ -1,3 +1,4 @@\n"
                " existing line\n"
                "-removed line\n"
                "+added line\n"
                " another line\n"
                for f in self.repo.modified_files
            ]
        return CommandResult.plain("\n".join(blocks).rstrip("\n"))

    # History

    def log(self, style: str = "full") -> CommandResult:
        """List the current branch's commits, newest first.

        Args:
            style: ``full``, ``oneline`` or ``graph``
        """
        commits = list(reversed(self.repo.current_branch.commits))
        if not commits:
            return CommandResult.plain("No commits yet")

        if style == "oneline":
            lines = [f"{c.hash} {c.subject}" for c in commits]
        elif style == "graph":
            lines = [f"* {c.hash} {c.subject}" for c in commits]
        else:
            lines = [self._format_commit(c) for c in commits]
        return CommandResult.plain("\n".join(lines).rstrip("\n"))

    def _format_commit(self, commit: Commit) -> str:
        header = f"commit {commit.hash}"
        if commit.is_merge:
            header += f" (merge of '{commit.merged_from}')"
        return (
            f"{header}\n"
            f"Author: {commit.author}\n"
            f"Date: {commit.date}\n\n"
            f"{_indent(commit.message)}\n"
        )

    def show(self, ref: str | None = None) -> CommandResult:
        """Show a commit (by hash prefix), a tag, or the latest commit."""
        branch = self.repo.current_branch

        tag = self.repo.tags.get(ref) if ref else None
        if tag is not None and tag.is_annotated:
            return CommandResult.plain(
                f"tag {ref}\n"
                f"Tagger: {tag.tagger}\n"
                f"Date: {tag.timestamp.strftime('%a %b %d %Y')}\n\n"
                f"{tag.message}\n\n"
                f"commit {tag.commit_hash}"
            )

        if tag is not None:
            # lightweight tags show the tagged commit, which may be on any branch
            commit = self._find_anywhere(tag.commit_hash)
            if commit is None:
                raise SimulatorError(f"fatal: bad object {ref}")
        elif ref:
            commit = branch.find_commit(ref)
            if commit is None:
                raise SimulatorError(f"fatal: bad object {ref}")
        else:
            commit = branch.head_commit
            if commit is None:
                return CommandResult.plain("No commits yet")

        parts = [self._format_commit(commit)]
        for f in commit.files:
            parts.append(
                f"diff --git a/{f} b/{f}\n"
                "new file mode 100644\n"
                "index 0000000..abc123\n"
                "--- /dev/null\n"
                f"+++ b/{f}\n"
                "@@ -0,0 +1,3 @@\n"
                "+file content\n"
            )
        return CommandResult.plain("\n".join(parts).rstrip("\n"))

    # Branching

    def branch_list(self) -> CommandResult:
        """List branches, marking the current one."""
        lines = [
            f"{'* ' if name == self.repo.current_branch_name else '  '}{name}"
            for name in self.repo.branches
        ]
        return CommandResult.plain("\n".join(lines))

    def _fork(self, name: str) -> None:
        if name in self.repo.branches:
            raise SimulatorError(f"fatal: A branch named '{name}' already exists.")
        self.repo.branches[name] = self.repo.current_branch.fork(name)
        log.debug("Created branch {} at {}", name, self.repo.branches[name].head)

    def branch_create(self, name: str) -> CommandResult:
        """Create a branch as a copy of the current one."""
        self._fork(name)
        return CommandResult.success(f"Created branch '{name}'")

    def branch_delete(self, name: str) -> CommandResult:
        """Delete a branch that is not checked out."""
        branch = self.repo.get_branch(name)
        if branch is None:
            raise SimulatorError(f"error: branch '{name}' not found.")
        if name == self.repo.current_branch_name:
            raise SimulatorError(
                f"error: Cannot delete branch '{name}' checked out at '{REPO_PATH}'"
            )
        del self.repo.branches[name]
        return CommandResult.success(f"Deleted branch {name} (was {branch.head}).")

    def checkout(self, name: str) -> CommandResult:
        """Switch to an existing branch."""
        repo = self.repo
        target = repo.get_branch(name)
        if target is None:
            raise SimulatorError(
                f"error: pathspec '{name}' did not match any file(s) known to git"
            )
        if name == repo.current_branch_name:
            return CommandResult.plain(f"Already on '{name}'")
        if repo.has_uncommitted_changes:
            raise SimulatorError(
                "error: Your local changes would be overwritten by checkout.\n"
                "Please commit your changes or stash them before you switch branches."
            )

        repo.current_branch_name = name
        head = target.head_commit
        repo.reset_working_directory(head.files if head else [])
        return CommandResult.success(f"Switched to branch '{name}'")

    def checkout_new(self, name: str) -> CommandResult:
        """Create a branch and switch to it.

        Unlike checkout(), pending changes are carried over without any
        guard and the working directory is left as it is.
        """
        self._fork(name)
        self.repo.current_branch_name = name
        return CommandResult.success(f"Switched to a new branch '{name}'")

    def checkout_file(self, path: str) -> CommandResult:
        """Discard the simulated edit to a modified path."""
        if path in self.repo.modified_files:
            self.repo.modified_files.remove(path)
            return CommandResult.success(f"Reverted changes to {path}")
        return CommandResult.plain(f"No changes to {path}")

    def merge(self, name: str) -> CommandResult:
        """Bring another branch's commits in and add a merge commit."""
        repo = self.repo
        source = repo.get_branch(name)
        if source is None:
            raise SimulatorError(f"merge: {name} - not something we can merge")
        if name == repo.current_branch_name:
            return CommandResult.plain("Already up to date.")

        current = repo.current_branch
        known = current.commit_hashes
        incoming = [c.copy() for c in source.commits if c.hash not in known]
        if not incoming:
            return CommandResult.plain("Already up to date.")

        current.commits.extend(incoming)

        files = list(current.commits[-2].files)
        for path in source.commits[-1].files:
            if path not in files:
                files.append(path)

        merge_commit = self._new_commit(
            f"Merge branch '{name}'",
            files,
            is_merge=True,
            merged_from=name,
        )
        current.append(merge_commit)
        repo.reset_working_directory(merge_commit.files)
        log.info("Merged {} into {} ({} commits)", name, current.name, len(incoming))

        return CommandResult.success(
            "Merge made by the 'recursive' strategy.\n"
            f" {len(incoming)} commit(s) merged from '{name}'"
        )

    def rebase(self, upstream: str) -> CommandResult:
        """Replay the current branch's own commits on top of upstream."""
        repo = self.repo
        target = repo.get_branch(upstream)
        if target is None:
            raise SimulatorError(f"fatal: invalid upstream '{upstream}'")

        current = repo.current_branch
        base = target.commit_hashes
        to_replay = [c for c in current.commits if c.hash not in base]
        if not to_replay:
            return CommandResult.plain("Current branch is up to date.")

        current.replace_commits([c.copy() for c in target.commits] + to_replay)
        return CommandResult.success(
            f"Successfully rebased and updated refs/heads/{current.name}."
        )

    def rebase_interactive(self) -> CommandResult:
        if len(self.repo.current_branch.commits) <= 1:
            return CommandResult.plain("Nothing to rebase")
        return CommandResult.success("Interactive rebase started (simulated)")

    def _find_anywhere(self, ref: str) -> Commit | None:
        """Return the first commit matching ref, searching branches in order."""
        for branch in self.repo.branches.values():
            commit = branch.find_commit(ref)
            if commit is not None:
                return commit
        return None

    def cherry_pick(self, ref: str) -> CommandResult:
        """Copy a commit from any branch onto the current one."""
        source = self._find_anywhere(ref)
        if source is None:
            raise SimulatorError(f"fatal: bad object {ref}")

        commit = self._new_commit(
            source.message, list(source.files), author=source.author
        )
        branch = self.repo.current_branch
        branch.append(commit)
        return CommandResult.success(f"[{branch.name} {commit.hash}] {source.message}")

    # Undoing things

    def revert(self, ref: str) -> CommandResult:
        """Add a commit that documents the revert of an earlier commit."""
        branch = self.repo.current_branch
        target = branch.find_commit(ref)
        if target is None:
            raise SimulatorError(f"fatal: bad object {ref}")

        commit = self._new_commit(
            f'Revert "{target.subject}"\n\nThis reverts commit {target.hash}.', []
        )
        branch.append(commit)
        return CommandResult.success(
            f'[{branch.name} {commit.hash}] Revert "{target.subject}"'
        )

    def reset(self) -> CommandResult:
        """Unstage everything, keeping the edits as modifications."""
        repo = self.repo
        if not repo.staged_files:
            return CommandResult.plain("No staged changes to reset")

        unstaged = list(repo.staged_files)
        for path in unstaged:
            if path not in repo.modified_files:
                repo.modified_files.append(path)
        repo.staged_files = []

        listing = "\n".join(f"M\t{path}" for path in unstaged)
        return CommandResult.plain(f"Unstaged changes after reset:\n{listing}")

    def reset_hard(self) -> CommandResult:
        """Throw away staged, modified and untracked paths."""
        repo = self.repo
        repo.staged_files = []
        repo.modified_files = []
        repo.untracked_files = []

        last = repo.current_branch.head_commit
        repo.reset_working_directory(last.files if last else [])
        log.warning("Hard reset of {} discarded pending changes", repo.current_branch_name)

        if last is None:
            return CommandResult.warning("HEAD is now at an empty branch")
        return CommandResult.warning(f"HEAD is now at {last.hash} {last.subject}")

    # Stash

    def stash_save(self) -> CommandResult:
        """Save modified and staged paths and clear them."""
        repo = self.repo
        if not repo.has_uncommitted_changes:
            return CommandResult.plain("No local changes to save")

        branch = repo.current_branch
        last = branch.head_commit
        subject = last.subject if last else ""
        entry = StashEntry(
            message=f"WIP on {branch.name}: {branch.head} {subject}",
            modified_files=list(repo.modified_files),
            staged_files=list(repo.staged_files),
        )
        repo.stash.append(entry)
        repo.modified_files = []
        repo.staged_files = []

        return CommandResult.success(
            f"Saved working directory and index state {entry.message}"
        )

    def stash_pop(self) -> CommandResult:
        """Restore the most recent stash entry, replacing pending edits."""
        repo = self.repo
        if not repo.stash:
            raise SimulatorError("No stash entries found.")

        entry = repo.stash.pop()
        repo.modified_files = list(entry.modified_files)
        repo.staged_files = list(entry.staged_files)
        restored = set(entry.modified_files) | set(entry.staged_files)
        repo.untracked_files = [f for f in repo.untracked_files if f not in restored]
        repo.deleted_files = [f for f in repo.deleted_files if f not in restored]

        return CommandResult.success(
            f"Dropped refs/stash@{{0}} ({entry.message[:50]}...)"
        )

    def stash_list(self) -> CommandResult:
        if not self.repo.stash:
            return CommandResult.plain("No stash entries found.")
        count = len(self.repo.stash)
        lines = [
            f"stash@{{{count - 1 - i}}}: {entry.message}"
            for i, entry in enumerate(self.repo.stash)
        ]
        return CommandResult.plain("\n".join(reversed(lines)))

    # Tags

    def tag_list(self) -> CommandResult:
        if not self.repo.tags:
            return CommandResult.plain("No tags found")
        return CommandResult.plain("\n".join(self.repo.tags))

    def tag(self, name: str, message: str = "") -> CommandResult:
        """Tag the current head."""
        if name in self.repo.tags:
            raise SimulatorError(f"fatal: tag '{name}' already exists")

        self.repo.tags[name] = Tag(
            commit_hash=self.repo.current_branch.head or "",
            message=message,
            tagger=self.repo.author,
        )
        return CommandResult.success(f"Created tag '{name}'")

    def tag_annotated(self, name: str, message: str | None = None) -> CommandResult:
        """Tag the current head with a message."""
        if name in self.repo.tags:
            raise SimulatorError(f"fatal: tag '{name}' already exists")
        if not message:
            message = self._ask(f"Enter message for tag '{name}':", f"Tag {name}")
        return self.tag(name, message)

    def push_tags(self) -> CommandResult:
        tags = list(self.repo.tags)
        if not tags:
            return CommandResult.plain("Everything up-to-date")

        lines = [
            f"Enumerating objects: {len(tags)}, done.",
            f"To https://github.com/user/{self.repo.repository_name}.git",
        ]
        lines.extend(f" * [new tag]         {t} -> {t}" for t in tags)
        return CommandResult.success("\n".join(lines))

    # Remotes

    def remote_list(self, verbose: bool = False) -> CommandResult:
        remotes = self.repo.remotes
        if not remotes:
            return CommandResult.plain("No remotes configured")
        if not verbose:
            return CommandResult.plain("\n".join(remotes))
        lines = []
        for name, remote in remotes.items():
            lines.append(f"{name}\t{remote.url} (fetch)")
            lines.append(f"{name}\t{remote.url} (push)")
        return CommandResult.plain("\n".join(lines))

    def remote_add(self, name: str, url: str) -> CommandResult:
        if name in self.repo.remotes:
            raise SimulatorError(f"fatal: remote {name} already exists.")
        self.repo.remotes[name] = Remote(url=url)
        return CommandResult.success(f"Added remote '{name}' at {url}")

    def fetch(self) -> CommandResult:
        return CommandResult.success(
            f"From https://github.com/user/{self.repo.repository_name}\n"
            " * branch            main       -> FETCH_HEAD\n"
            "Fetching objects: 100% (3/3), done."
        )

    def pull(self) -> CommandResult:
        return CommandResult.plain(
            f"From https://github.com/user/{self.repo.repository_name}\n"
            f" * branch            {self.repo.current_branch_name}     -> FETCH_HEAD\n"
            "Already up to date."
        )

    def push(self) -> CommandResult:
        """Publish the current head to its upstream on origin."""
        repo = self.repo
        branch = repo.current_branch
        origin = repo.remotes.get("origin")
        if origin is None or not origin.upstream(branch.name):
            raise SimulatorError(
                f"fatal: The current branch {branch.name} has no upstream branch.\n"
                "To push the current branch and set the remote as upstream, use\n\n"
                f"    git push --set-upstream origin {branch.name}"
            )

        origin.branches[branch.name] = branch.head
        count = len(branch.commits)
        return CommandResult.success(
            f"Enumerating objects: {count}, done.\n"
            f"Counting objects: 100% ({count}/{count}), done.\n"
            f"To https://github.com/user/{repo.repository_name}.git\n"
            f"   {branch.head}  {branch.name} -> {branch.name}"
        )

    def push_upstream(self) -> CommandResult:
        """Publish the current head and record it as the upstream."""
        repo = self.repo
        branch = repo.current_branch
        origin = repo.remotes.get("origin")
        if origin is None:
            raise SimulatorError(
                "fatal: 'origin' does not appear to be a git repository"
            )

        origin.branches[branch.name] = branch.head
        count = len(branch.commits)
        return CommandResult.success(
            f"Enumerating objects: {count}, done.\n"
            f"Counting objects: 100% ({count}/{count}), done.\n"
            f"To https://github.com/user/{repo.repository_name}.git\n"
            f" * [new branch]      {branch.name} -> {branch.name}\n"
            f"Branch '{branch.name}' set up to track remote branch "
            f"'{branch.name}' from 'origin'."
        )
