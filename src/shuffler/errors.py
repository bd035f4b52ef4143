from __future__ import annotations


class ShufflerError(Exception):
    """Base class for engine failures that should stop the session."""


class NoWorkloadsError(ShufflerError):
    """Raised when the pool is empty and there is nothing left to play."""


class PersistenceError(ShufflerError):
    """Raised when a stats or session record cannot be written."""
