"""Error taxonomy shared by the stores, the gateway and the API layer."""


class AuthenticationRequired(Exception):
    """Raised when a mutation is attempted with no bound identity."""

    def __init__(self, message: str = "Authentication required.") -> None:
        super().__init__(message)


class PersistenceFailure(Exception):
    """A gateway round trip failed.

    The message carries the underlying backend error text unmodified.
    """

    def __init__(self, message: str, *, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class NotFoundOrForbidden(PersistenceFailure):
    """An update or delete affected zero rows.

    The row either does not exist or belongs to another owner; the two
    cases are deliberately indistinguishable.
    """

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(
            f"No {table} row with id {record_id} for the current user",
            table=table,
        )
        self.record_id = record_id


class InvalidReference(ValueError):
    """A payload points at a parent record that is not in the caller's data."""
