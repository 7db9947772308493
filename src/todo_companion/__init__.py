"""todo-companion: to-do tasks behind a caching repository (remote service + local SQLite)."""

__version__ = "0.1.0"
