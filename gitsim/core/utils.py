"""Utility functions and decorators for gitsim core."""

import functools
import logging
from typing import Any, Callable, TypeVar
from uuid import uuid4

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

HASH_LENGTH = 7


def generate_hash(existing: set[str] | None = None) -> str:
    """Return a short opaque commit id not present in existing."""
    existing = existing or set()
    while True:
        candidate = uuid4().hex[:HASH_LENGTH]
        if candidate not in existing:
            return candidate


def safe_command(fallback: Callable[..., Any]) -> Callable[[F], F]:
    """Decorator to keep unexpected exceptions from escaping a command.

    The wrapped call's exception is logged with its traceback and the
    result of ``fallback(exc, *args, **kwargs)`` is returned instead, so
    a bug in a single command never takes the simulator down.

    Usage:
        @safe_command(lambda exc, self, verb, args: CommandResult.error(str(exc)))
        def execute(self, verb: str, args: list[str]) -> CommandResult:
            ...

    Args:
        fallback: Builds the value returned when the call raises.

    Returns:
        A decorator producing the guarded function.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.exception(f"Exception in command {func.__qualname__}")
                return fallback(exc, *args, **kwargs)
        return wrapper  # type: ignore[return-value]
    return decorator
