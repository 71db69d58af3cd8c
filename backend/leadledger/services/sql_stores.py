import json
import logging
from contextlib import contextmanager
from datetime import date
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadledger.core.errors import CorruptDraft, StoreUnavailable
from leadledger.models.entry import DailyEntryRecord, EntryDraft
from leadledger.schemas.ledger import COUNTER_FIELDS, DailyEntry

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store %s failed: %s", action, exc)
        raise StoreUnavailable(f"{action} failed") from exc


def _record_to_entry(row: DailyEntryRecord) -> DailyEntry:
    return DailyEntry(
        date=row.entry_date,
        discard_reason=row.discard_reason or "",
        **{name: getattr(row, name) for name in COUNTER_FIELDS},
    )


class SqlEntryStore:
    def __init__(self, db: Session):
        self.db = db

    def list(self, broker_key: str) -> list[DailyEntry]:
        with _store_errors(self.db, "list entries"):
            rows = (
                self.db.query(DailyEntryRecord)
                .filter(DailyEntryRecord.broker_name == broker_key)
                .order_by(DailyEntryRecord.entry_date.asc())
                .all()
            )
        return [_record_to_entry(r) for r in rows]

    def upsert(self, broker_key: str, entry: DailyEntry) -> None:
        with _store_errors(self.db, "upsert entry"):
            row = (
                self.db.query(DailyEntryRecord)
                .filter(DailyEntryRecord.broker_name == broker_key, DailyEntryRecord.entry_date == entry.date)
                .first()
            )
            if row is None:
                row = DailyEntryRecord(broker_name=broker_key, entry_date=entry.date)
                self.db.add(row)
            for name in COUNTER_FIELDS:
                setattr(row, name, getattr(entry, name))
            row.discard_reason = entry.discard_reason
            self.db.commit()

    def delete(self, broker_key: str, entry_date: date) -> None:
        with _store_errors(self.db, "delete entry"):
            self.db.query(DailyEntryRecord).filter(
                DailyEntryRecord.broker_name == broker_key,
                DailyEntryRecord.entry_date == entry_date,
            ).delete()
            self.db.commit()


class SqlDraftCache:
    def __init__(self, db: Session):
        self.db = db

    def _row(self, broker_key: str, entry_date: date) -> EntryDraft | None:
        return (
            self.db.query(EntryDraft)
            .filter(EntryDraft.broker_name == broker_key, EntryDraft.entry_date == entry_date)
            .first()
        )

    def get(self, broker_key: str, entry_date: date) -> dict[str, Any] | None:
        with _store_errors(self.db, "read draft"):
            row = self._row(broker_key, entry_date)
        if row is None:
            return None
        try:
            data = json.loads(row.payload)
        except ValueError as exc:
            raise CorruptDraft(f"draft payload is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptDraft("draft payload is not an object")
        return data

    def set(self, broker_key: str, entry_date: date, data: dict[str, Any]) -> None:
        with _store_errors(self.db, "write draft"):
            row = self._row(broker_key, entry_date)
            if row is None:
                row = EntryDraft(broker_name=broker_key, entry_date=entry_date, payload="")
                self.db.add(row)
            row.payload = json.dumps(data)
            self.db.commit()

    def clear(self, broker_key: str, entry_date: date) -> None:
        with _store_errors(self.db, "clear draft"):
            self.db.query(EntryDraft).filter(
                EntryDraft.broker_name == broker_key,
                EntryDraft.entry_date == entry_date,
            ).delete()
            self.db.commit()
