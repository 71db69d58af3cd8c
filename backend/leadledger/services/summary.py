import re
from collections.abc import Iterable
from datetime import date

from leadledger.core.errors import ValidationError
from leadledger.schemas.ledger import LedgerEntry, MonthlySummary
from leadledger.services.ledger import lead_delta

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_year_month(year_month: str) -> date:
    """Return the first day of a "YYYY-MM" month."""
    match = _YEAR_MONTH_RE.match(year_month or "")
    if not match:
        raise ValidationError(f"month must be YYYY-MM, got {year_month!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"month out of range in {year_month!r}")
    try:
        return date(year, month, 1)
    except ValueError as exc:
        raise ValidationError(f"month out of range in {year_month!r}") from exc


def _in_month(entry: LedgerEntry, month_start: date) -> bool:
    return (entry.date.year, entry.date.month) == (month_start.year, month_start.month)


def month_entries(ledger: Iterable[LedgerEntry], year_month: str) -> list[LedgerEntry]:
    start = parse_year_month(year_month)
    return sorted((e for e in ledger if _in_month(e, start)), key=lambda e: e.date)


def summarize_month(
    ledger: Iterable[LedgerEntry],
    year_month: str,
    initial_leads: int = 0,
    monthly_sales_goal: int | None = None,
) -> MonthlySummary:
    """Aggregate one calendar month of a ledger.

    The opening balance is re-derived by folding every entry dated before the
    month, starting from the ledger's opening balance (`initial_leads` when the
    ledger is empty). Works for any month, with or without entries in it.
    """
    month_start = parse_year_month(year_month)
    chronological = sorted(ledger, key=lambda e: e.date)

    opening = chronological[0].start_of_day_balance if chronological else initial_leads
    for entry in chronological:
        if entry.date >= month_start:
            break
        opening += lead_delta(entry)

    in_month = [e for e in chronological if _in_month(e, month_start)]
    new_leads = sum(e.new_leads for e in in_month)
    repique_leads = sum(e.repique_leads or 0 for e in in_month)
    signed_leads = sum(e.signed_leads for e in in_month)
    discarded_leads = sum(e.discarded_leads for e in in_month)
    negotiation_leads = sum(e.negotiation_leads for e in in_month)

    total_leads_in = new_leads + repique_leads
    conversion_rate = round(signed_leads / total_leads_in * 100, 1) if total_leads_in > 0 else 0.0

    goal_progress = None
    if monthly_sales_goal and monthly_sales_goal > 0:
        goal_progress = round(signed_leads / monthly_sales_goal * 100)

    return MonthlySummary(
        year_month=year_month,
        initial_leads_for_month=opening,
        final_leads_for_month=opening + total_leads_in - discarded_leads - signed_leads,
        new_leads=new_leads,
        repique_leads=repique_leads,
        signed_leads=signed_leads,
        discarded_leads=discarded_leads,
        negotiation_leads=negotiation_leads,
        total_leads_in=total_leads_in,
        conversion_rate=conversion_rate,
        entry_count=len(in_month),
        monthly_sales_goal=monthly_sales_goal,
        goal_progress=goal_progress,
    )
