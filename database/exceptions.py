class DatabaseError(Exception):
    """Base for all round store errors. The message is safe to show to a user."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFoundError(DatabaseError):
    """Round not found."""


class DuplicateError(DatabaseError):
    """Unique constraint violation."""


class IntegrityError(DatabaseError):
    """Foreign key or check constraint violation."""


class StoreUnavailableError(DatabaseError):
    """Connection or query failure talking to the store."""


class InvalidRecordError(DatabaseError):
    """A stored row that does not form a valid round summary."""
