from leadledger.models.broker import Broker
from leadledger.models.entry import DailyEntryRecord, EntryDraft

__all__ = [
    "Broker",
    "DailyEntryRecord",
    "EntryDraft",
]
