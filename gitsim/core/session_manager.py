"""Session manager for independent simulator sandboxes."""

import threading
from uuid import UUID

import logbook
from PySide6.QtCore import QObject, Signal

from gitsim.models.config import SimulatorConfig
from gitsim.models.repository import Repository
from gitsim.models.session import Session

from .command_engine import CommandEngine
from .simulator import CommandResult, Prompt

log = logbook.Logger(__name__)


class SessionManager(QObject):
    """Manages one repository and command engine per simulated user.

    Each session owns its Repository outright; commands for the same
    session are serialized by a per-session lock. The lock is re-entrant
    so slots connected to an engine's signals may call snapshot() or
    remove_session() for the session that is running.
    """

    # Signals
    session_created = Signal(Session)
    session_removed = Signal(UUID)
    command_finished = Signal(Session, object)  # CommandResult

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or SimulatorConfig()
        self._sessions: dict[UUID, Session] = {}
        self._engines: dict[UUID, CommandEngine] = {}
        self._locks: dict[UUID, threading.RLock] = {}

    @property
    def sessions(self) -> list[Session]:
        """Get all sessions."""
        return list(self._sessions.values())

    def get_session(self, session_id: UUID) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def get_engine(self, session_id: UUID) -> CommandEngine | None:
        """Get the command engine bound to a session."""
        return self._engines.get(session_id)

    def create_session(
        self, name: str | None = None, prompt: Prompt | None = None
    ) -> Session:
        """Create a new session with a freshly seeded repository."""
        session = Session(repository=Repository.create(self._config))
        if name:
            session.name = name

        self._sessions[session.id] = session
        self._engines[session.id] = CommandEngine(
            repository=session.repository, prompt=prompt, parent=self
        )
        self._locks[session.id] = threading.RLock()
        log.info("Created session {} ({})", session.name, session.id)

        self.session_created.emit(session)
        return session

    def remove_session(self, session_id: UUID) -> None:
        """Remove a session."""
        session = self._sessions.get(session_id)
        if not session:
            return

        lock = self._locks[session_id]
        with lock:
            engine = self._engines.pop(session_id)
            engine.deleteLater()
            del self._sessions[session_id]
            del self._locks[session_id]

        log.info("Removed session {}", session_id)
        self.session_removed.emit(session_id)

    def run(self, session_id: UUID, line: str) -> CommandResult:
        """Run a terminal line in a session.

        Raises:
            KeyError: If the session does not exist
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Unknown session: {session_id}")

        with self._locks[session_id]:
            result = self._engines[session_id].run(line)
            session.command_count += 1

        self.command_finished.emit(session, result)
        return result

    def snapshot(self, session_id: UUID) -> dict:
        """Return the session's state snapshot for rendering."""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Unknown session: {session_id}")
        with self._locks[session_id]:
            return session.to_dict()
