from collections.abc import Iterable

from leadledger.schemas.ledger import AllTimeStats, DailyEntry, EntryFields, LedgerEntry


def lead_delta(entry: EntryFields) -> int:
    # Inflow is new + repique; outflow is discarded + signed. Missing repique reads as 0.
    return entry.new_leads + (entry.repique_leads or 0) - entry.discarded_leads - entry.signed_leads


def build_ledger(initial_leads: int, entries: Iterable[DailyEntry]) -> list[LedgerEntry]:
    """Fold daily entries, oldest first, into running start/end-of-day balances.

    The first entry opens at `initial_leads`; every later entry opens at the
    previous entry's closing balance. Balances may go negative.
    """
    chronological = sorted(entries, key=lambda e: e.date)

    balance = initial_leads
    ledger: list[LedgerEntry] = []
    for entry in chronological:
        start = balance
        end = start + lead_delta(entry)
        ledger.append(
            LedgerEntry(
                **entry.model_dump(include=set(DailyEntry.model_fields)),
                start_of_day_balance=start,
                end_of_day_balance=end,
            )
        )
        balance = end

    return ledger


def all_time_stats(entries: Iterable[DailyEntry]) -> AllTimeStats:
    total_new = 0
    total_repique = 0
    total_discarded = 0
    for entry in entries:
        total_new += entry.new_leads
        total_repique += entry.repique_leads or 0
        total_discarded += entry.discarded_leads

    return AllTimeStats(total_received=total_new + total_repique, total_discarded=total_discarded)
