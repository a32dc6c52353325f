from __future__ import annotations


class AuthStateError(Exception):
    pass


class StoreOpenError(AuthStateError):
    """The backing folder or database file could not be created or opened."""


class BatchWriteError(AuthStateError):
    """A keyed batch failed and was rolled back as a whole."""
