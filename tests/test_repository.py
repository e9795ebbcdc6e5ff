"""Tests for the repository data models."""

import pytest

from gitsim.models.commit import Commit
from gitsim.models.config import SimulatorConfig
from gitsim.models.repository import Branch, Repository


class TestRepositoryCreate:
    """Tests for Repository.create()."""

    def test_seed_branch(self) -> None:
        """Test a fresh repository has main with one seed commit."""
        repo = Repository.create()

        assert repo.current_branch_name == "main"
        assert list(repo.branches) == ["main"]
        assert len(repo.current_branch.commits) == 1
        assert repo.current_branch.head == "a1b2c3d"
        assert repo.current_branch.head_commit.files == ["README.md", ".gitignore"]

    def test_seed_working_tree(self) -> None:
        """Test untracked seed files are in the working directory."""
        repo = Repository.create()

        assert repo.working_directory == [
            "README.md",
            ".gitignore",
            "index.html",
            "style.css",
        ]
        assert repo.untracked_files == ["index.html", "style.css"]
        assert repo.staged_files == []
        assert repo.modified_files == []

    def test_seed_origin(self) -> None:
        """Test origin records the seed commit for main only."""
        repo = Repository.create()

        origin = repo.remotes["origin"]
        assert origin.upstream("main") == "a1b2c3d"
        assert origin.upstream("develop") is None
        assert origin.upstream("feature") is None

    def test_custom_config(self) -> None:
        """Test seed values come from the config."""
        config = SimulatorConfig(
            repository_name="demo",
            default_branch="trunk",
            seed_hash="fffffff",
            untracked_files=[],
        )
        repo = Repository.create(config)

        assert repo.repository_name == "demo"
        assert repo.current_branch_name == "trunk"
        assert repo.current_branch.head == "fffffff"
        assert repo.is_clean

    def test_author(self) -> None:
        """Test author is formatted from user.name and user.email."""
        repo = Repository.create()
        repo.config["user.name"] = "Ada"
        repo.config["user.email"] = "ada@example.com"

        assert repo.author == "Ada <ada@example.com>"


class TestBranch:
    """Tests for Branch."""

    def test_append_moves_head(self) -> None:
        """Test appending a commit advances head."""
        branch = Branch(name="main")
        branch.append(Commit(hash="1111111", message="one", author="a"))
        branch.append(Commit(hash="2222222", message="two", author="a"))

        assert branch.head == "2222222"
        assert branch.head_commit.message == "two"

    def test_find_commit_prefix(self) -> None:
        """Test the first commit matching a prefix wins."""
        branch = Branch(name="main")
        branch.append(Commit(hash="abc1234", message="first", author="a"))
        branch.append(Commit(hash="abc9999", message="second", author="a"))

        assert branch.find_commit("abc").message == "first"
        assert branch.find_commit("abc9").message == "second"
        assert branch.find_commit("zzz") is None

    def test_fork_copies_commits(self) -> None:
        """Test a fork owns independent copies of the commits."""
        branch = Branch(name="main")
        branch.append(Commit(hash="1111111", message="one", author="a", files=["x"]))

        fork = branch.fork("feature")
        fork.commits[0].message = "changed"
        fork.commits[0].files.append("y")

        assert fork.head == branch.head
        assert branch.commits[0].message == "one"
        assert branch.commits[0].files == ["x"]

    def test_empty_branch(self) -> None:
        """Test an empty branch has no head commit."""
        branch = Branch(name="empty")

        assert branch.head_commit is None
        assert branch.commit_hashes == set()


class TestWorkingTreeEdits:
    """Tests for create_file / modify_file / delete_file."""

    @pytest.fixture
    def repo(self) -> Repository:
        return Repository.create(SimulatorConfig(untracked_files=[]))

    def test_create_file(self, repo: Repository) -> None:
        """Test creating a file makes it untracked."""
        assert repo.create_file("x.txt") is True

        assert "x.txt" in repo.working_directory
        assert repo.untracked_files == ["x.txt"]

    def test_create_existing_file(self, repo: Repository) -> None:
        """Test creating an existing path is a no-op."""
        assert repo.create_file("README.md") is False
        assert repo.untracked_files == []

    def test_modify_file(self, repo: Repository) -> None:
        """Test modifying a tracked file."""
        assert repo.modify_file("README.md") is True
        assert repo.modified_files == ["README.md"]

        # Second edit does not duplicate
        assert repo.modify_file("README.md") is False
        assert repo.modified_files == ["README.md"]

    def test_modify_missing_file(self, repo: Repository) -> None:
        """Test modifying a path outside the working tree fails."""
        assert repo.modify_file("nope.txt") is False

    def test_modify_untracked_file(self, repo: Repository) -> None:
        """Test modifying an untracked file moves it to modified."""
        repo.create_file("x.txt")
        repo.modify_file("x.txt")

        assert repo.untracked_files == []
        assert repo.modified_files == ["x.txt"]

    def test_delete_file(self, repo: Repository) -> None:
        """Test deleting a file removes it from every other set."""
        repo.modify_file("README.md")
        assert repo.delete_file("README.md") is True

        assert "README.md" not in repo.working_directory
        assert repo.modified_files == []
        assert repo.deleted_files == ["README.md"]

    def test_delete_missing_file(self, repo: Repository) -> None:
        """Test deleting an unknown path fails."""
        assert repo.delete_file("nope.txt") is False
        assert repo.deleted_files == []


class TestPendingSets:
    """Tests for pending-set helpers."""

    def test_stage_moves_path(self) -> None:
        """Test staging removes the path from other pending sets."""
        repo = Repository.create()
        repo.stage("index.html")

        assert repo.staged_files == ["index.html"]
        assert "index.html" not in repo.untracked_files
        assert repo.pending_overlaps() == set()

    def test_pending_overlaps(self) -> None:
        """Test overlaps are reported."""
        repo = Repository.create()
        repo.staged_files.append("index.html")

        assert repo.pending_overlaps() == {"index.html"}

    def test_is_clean(self) -> None:
        """Test is_clean considers every pending set."""
        repo = Repository.create(SimulatorConfig(untracked_files=[]))
        assert repo.is_clean

        repo.deleted_files.append(".gitignore")
        assert not repo.is_clean
        assert not repo.has_uncommitted_changes


class TestSnapshot:
    """Tests for Repository.to_dict()."""

    def test_snapshot_shape(self) -> None:
        """Test the snapshot carries every part of the state."""
        data = Repository.create().to_dict()

        assert data["current_branch"] == "main"
        assert data["branches"]["main"]["head"] == "a1b2c3d"
        assert data["branches"]["main"]["commits"][0]["parent"] is None
        assert data["untracked_files"] == ["index.html", "style.css"]
        assert data["remotes"]["origin"]["branches"]["main"] == "a1b2c3d"
        assert data["aliases"]["co"] == "checkout"
        assert data["stash"] == []
        assert data["tags"] == {}

    def test_snapshot_is_a_copy(self) -> None:
        """Test mutating the snapshot does not touch the repository."""
        repo = Repository.create()
        data = repo.to_dict()
        data["untracked_files"].clear()

        assert repo.untracked_files == ["index.html", "style.css"]
