"""gitsim - an in-memory git simulator for teaching git commands."""

__version__ = "0.1.0"
