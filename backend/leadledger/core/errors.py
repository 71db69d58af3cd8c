from datetime import date


class LedgerError(Exception):
    """Base class for errors raised by the ledger engine and its stores."""


class ValidationError(LedgerError):
    """Rejected input. Raised before any store is touched."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class StoreUnavailable(LedgerError):
    """An entry store or draft cache could not be read or written."""


class BulkCommitInterrupted(StoreUnavailable):
    """A bulk commit stopped at `failed_date`; `applied_dates` were already written."""

    def __init__(self, applied_dates: list[date], failed_date: date, cause: Exception | None = None):
        self.applied_dates = list(applied_dates)
        self.failed_date = failed_date
        self.cause = cause
        super().__init__(
            f"bulk commit stopped at {failed_date.isoformat()} after {len(self.applied_dates)} applied date(s)"
        )


class CorruptDraft(LedgerError):
    """A cached draft could not be parsed back into entry fields."""
