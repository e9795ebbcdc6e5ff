"""Pytest configuration and fixtures."""

import itertools
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication

from gitsim.core.command_engine import CommandEngine
from gitsim.models.config import SimulatorConfig


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def qapp():
    """Create a QCoreApplication for Qt object tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def sequential_hashes():
    """Return a hash factory producing 0000001, 0000002, ..."""
    counter = itertools.count(1)
    return lambda existing: f"{next(counter):07d}"


@pytest.fixture
def engine(qapp) -> CommandEngine:
    """Engine on the default seeded repository (two untracked files)."""
    return CommandEngine(hash_factory=sequential_hashes())


@pytest.fixture
def clean_engine(qapp) -> CommandEngine:
    """Engine whose working tree starts with nothing pending."""
    config = SimulatorConfig(untracked_files=[])
    return CommandEngine(config=config, hash_factory=sequential_hashes())
