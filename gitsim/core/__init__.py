"""Core services for gitsim."""

from .command_engine import CommandEngine
from .session_manager import SessionManager
from .simulator import CommandResult, GitSimulator, ResultKind, SimulatorError

__all__ = [
    "CommandEngine",
    "CommandResult",
    "GitSimulator",
    "ResultKind",
    "SessionManager",
    "SimulatorError",
]
