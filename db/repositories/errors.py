"""
Repository-layer exceptions.
"""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """
    Raised when the database rejects or cannot complete a write.

    Wraps the underlying SQLAlchemy error; callers get an opaque
    infrastructure failure that is never retried.
    """

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or f"Unable to persist {operation}.")
        self.operation = operation
        self.message = str(self)
