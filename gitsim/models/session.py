"""Simulator session data model."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from .repository import Repository


@dataclass
class Session:
    """Represents one simulated user's sandbox repository."""

    id: UUID = field(default_factory=uuid4)
    name: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    repository: Repository = field(default_factory=Repository.create)
    command_count: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Session {self.created_at.strftime('%H:%M')}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "command_count": self.command_count,
            "repository": self.repository.to_dict(),
        }

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Session):
            return False
        return self.id == other.id
