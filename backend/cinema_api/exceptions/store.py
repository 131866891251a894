__all__ = [
    "StoreFailure",
    "StoreUnavailable",
    "QueryFailed",
    "ReferenceViolation",
]


class StoreFailure(Exception):
    """Base class for errors raised while talking to the database."""

    def __init__(self, message: str = "The database operation failed."):
        super().__init__(message)
        self.message = message


class StoreUnavailable(StoreFailure):
    """Raised when the database cannot be reached or does not answer in time."""


class QueryFailed(StoreFailure):
    """Raised when the database rejects a statement."""


class ReferenceViolation(QueryFailed):
    """Raised when a row points at a movie or hall that does not exist."""
