"""Exceptions raised by billfold services.

Pure domain functions report problems as error strings. Services turn
those into the exceptions below, and commands print them and exit.
"""


class BillfoldError(Exception):
    """Base class for all billfold errors."""


class ValidationError(BillfoldError):
    """Input failed validation. Nothing was written."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(BillfoldError):
    """A referenced record does not exist."""

    def __init__(self, resource: str, record_id: object) -> None:
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} with id {record_id} not found")


class ConflictError(BillfoldError):
    """The change clashes with existing data (duplicates, references in use)."""


class ReadOnlyError(BillfoldError):
    """A locked month was asked to change."""

    def __init__(self, month: str, action: str = "make changes") -> None:
        self.month = month
        super().__init__(f"Month {month} is read-only. Unlock it to {action}.")


def ensure_valid(errors: list[str]) -> None:
    """Raise ValidationError if a validator reported any errors."""
    if errors:
        raise ValidationError(errors)


def ensure_found(record: dict | None, resource: str, record_id: object) -> dict:
    """Return ``record``, or raise NotFoundError if it is None."""
    if record is None:
        raise NotFoundError(resource, record_id)
    return record
