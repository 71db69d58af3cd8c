from datetime import date
from typing import Any, Protocol

from leadledger.core.config import get_settings
from leadledger.schemas.ledger import DailyEntry


def draft_key(broker_key: str, entry_date: date, prefix: str | None = None) -> str:
    if prefix is None:
        prefix = get_settings().DRAFT_KEY_PREFIX
    return f"{prefix}{broker_key}_{entry_date.isoformat()}"


class EntryStore(Protocol):
    def list(self, broker_key: str) -> list[DailyEntry]: ...

    def upsert(self, broker_key: str, entry: DailyEntry) -> None: ...

    def delete(self, broker_key: str, entry_date: date) -> None: ...


class DraftCache(Protocol):
    # get() returns the raw mapping as stored; the caller validates its shape.
    def get(self, broker_key: str, entry_date: date) -> dict[str, Any] | None: ...

    def set(self, broker_key: str, entry_date: date, data: dict[str, Any]) -> None: ...

    def clear(self, broker_key: str, entry_date: date) -> None: ...


class InMemoryEntryStore:
    def __init__(self, entries: dict[str, list[DailyEntry]] | None = None):
        self._entries: dict[str, dict[date, DailyEntry]] = {}
        for broker_key, items in (entries or {}).items():
            for entry in items:
                self.upsert(broker_key, entry)

    def list(self, broker_key: str) -> list[DailyEntry]:
        return [e.model_copy() for e in self._entries.get(broker_key, {}).values()]

    def upsert(self, broker_key: str, entry: DailyEntry) -> None:
        self._entries.setdefault(broker_key, {})[entry.date] = entry.model_copy()

    def delete(self, broker_key: str, entry_date: date) -> None:
        self._entries.get(broker_key, {}).pop(entry_date, None)


class InMemoryDraftCache:
    def __init__(self, prefix: str | None = None):
        self.prefix = prefix
        self._drafts: dict[str, dict[str, Any]] = {}

    def get(self, broker_key: str, entry_date: date) -> dict[str, Any] | None:
        data = self._drafts.get(draft_key(broker_key, entry_date, self.prefix))
        return dict(data) if data is not None else None

    def set(self, broker_key: str, entry_date: date, data: dict[str, Any]) -> None:
        self._drafts[draft_key(broker_key, entry_date, self.prefix)] = dict(data)

    def clear(self, broker_key: str, entry_date: date) -> None:
        self._drafts.pop(draft_key(broker_key, entry_date, self.prefix), None)

    def keys(self) -> list[str]:
        return sorted(self._drafts)
