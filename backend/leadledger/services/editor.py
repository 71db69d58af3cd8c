import logging
from collections.abc import Callable
from datetime import date, timedelta

from pydantic import ValidationError as PydanticValidationError

from leadledger.core.errors import BulkCommitInterrupted, CorruptDraft, StoreUnavailable, ValidationError
from leadledger.schemas.ledger import (
    COUNTER_FIELDS,
    BrokerProfile,
    BulkCommitResult,
    BulkOverrides,
    DailyEntry,
    EditState,
    EntryFields,
)
from leadledger.services.stores import DraftCache, EntryStore

logger = logging.getLogger(__name__)


def _counter_errors(values: dict[str, int | None]) -> list[str]:
    errors = []
    for name, value in values.items():
        if value is None and name == "repique_leads":
            continue
        if value < 0:
            errors.append(f"{name} must be a non-negative integer")
    return errors


def _date_range(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class EntryEditor:
    """Reconciles the editable form state of one date against drafts and committed entries."""

    def __init__(self, entry_store: EntryStore, draft_cache: DraftCache, today: Callable[[], date] = date.today):
        self.entry_store = entry_store
        self.draft_cache = draft_cache
        self.today = today

    def _find_entry(self, broker_key: str, entry_date: date) -> DailyEntry | None:
        for entry in self.entry_store.list(broker_key):
            if entry.date == entry_date:
                return entry
        return None

    def _load_draft(self, broker_key: str, entry_date: date) -> EntryFields | None:
        try:
            raw = self.draft_cache.get(broker_key, entry_date)
            if raw is None:
                return None
            try:
                return EntryFields.model_validate(raw)
            except PydanticValidationError as exc:
                raise CorruptDraft(str(exc)) from exc
        except CorruptDraft as exc:
            logger.warning("Discarding corrupt draft for %s on %s: %s", broker_key, entry_date.isoformat(), exc)
            try:
                self.draft_cache.clear(broker_key, entry_date)
            except StoreUnavailable as clear_exc:
                logger.error(
                    "Could not clear corrupt draft for %s on %s: %s", broker_key, entry_date.isoformat(), clear_exc
                )
            return None

    def load_edit_state(self, broker_key: str, entry_date: date) -> EditState:
        draft = self._load_draft(broker_key, entry_date)
        if draft is not None:
            return EditState(data=draft, is_draft=True)

        existing = self._find_entry(broker_key, entry_date)
        if existing is not None:
            return EditState(data=existing.to_fields(), is_draft=False)

        return EditState(data=EntryFields(), is_draft=False)

    def save_draft(self, broker_key: str, entry_date: date, data: EntryFields) -> None:
        self.draft_cache.set(broker_key, entry_date, data.model_dump(include=set(EntryFields.model_fields)))

    def _check_not_future(self, label: str, value: date) -> list[str]:
        if value > self.today():
            return [f"{label} {value.isoformat()} is in the future"]
        return []

    def commit_entry(self, broker_key: str, entry_date: date, data: EntryFields) -> DailyEntry:
        errors = self._check_not_future("entry date", entry_date)
        errors += _counter_errors({name: getattr(data, name) for name in COUNTER_FIELDS})
        if errors:
            raise ValidationError(errors)

        values = data.model_dump(include=set(EntryFields.model_fields))
        if values["discarded_leads"] == 0:
            values["discard_reason"] = ""

        entry = DailyEntry(date=entry_date, **values)
        self.entry_store.upsert(broker_key, entry)
        self.draft_cache.clear(broker_key, entry_date)
        logger.info("Committed entry for %s on %s", broker_key, entry_date.isoformat())
        return entry

    def delete_entry(self, broker_key: str, entry_date: date) -> None:
        self.entry_store.delete(broker_key, entry_date)
        self.draft_cache.clear(broker_key, entry_date)
        logger.info("Deleted entry for %s on %s", broker_key, entry_date.isoformat())

    def commit_bulk(self, broker_key: str, start: date, end: date, overrides: BulkOverrides) -> BulkCommitResult:
        """Apply sparse counter overrides to every date in [start, end], inclusive.

        Each date gets exactly one write: overridden counters take the new
        value, the rest keep the committed value (or 0 for a new date), and the
        discard reason is carried over untouched. Writes are sequential and
        independent; the first store failure stops the run and is raised as
        BulkCommitInterrupted listing the dates already applied.
        """
        errors = self._check_not_future("start date", start) + self._check_not_future("end date", end)
        if start > end:
            errors.append("start date must not be after end date")
        specified = overrides.specified()
        errors += _counter_errors(specified)
        if errors:
            raise ValidationError(errors)

        existing = {e.date: e for e in self.entry_store.list(broker_key) if start <= e.date <= end}

        applied: list[date] = []
        for current in _date_range(start, end):
            previous = existing.get(current)
            values = {}
            for name in COUNTER_FIELDS:
                if name in specified:
                    values[name] = specified[name]
                elif previous is not None:
                    values[name] = getattr(previous, name) or 0
                else:
                    values[name] = 0

            entry = DailyEntry(
                date=current,
                discard_reason=previous.discard_reason if previous is not None else "",
                **values,
            )
            try:
                self.entry_store.upsert(broker_key, entry)
                self.draft_cache.clear(broker_key, current)
            except StoreUnavailable as exc:
                logger.warning(
                    "Bulk commit for %s interrupted at %s after %d date(s)",
                    broker_key,
                    current.isoformat(),
                    len(applied),
                )
                raise BulkCommitInterrupted(applied, current, exc) from exc
            applied.append(current)

        logger.info("Bulk committed %d date(s) for %s from %s to %s", len(applied), broker_key, start, end)
        return BulkCommitResult(applied_dates=applied)

    def profile(self, broker_key: str, initial_leads: int = 0, monthly_sales_goal: int | None = None) -> BrokerProfile:
        return BrokerProfile(
            broker_name=broker_key,
            initial_leads=initial_leads,
            monthly_sales_goal=monthly_sales_goal,
            daily_entries=sorted(self.entry_store.list(broker_key), key=lambda e: e.date),
        )
