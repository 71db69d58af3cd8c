from io import BytesIO, StringIO
import csv

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from leadledger.core.config import get_settings
from leadledger.schemas.ledger import COUNTER_FIELDS, BrokerProfile
from leadledger.services.ledger import build_ledger
from leadledger.services.summary import month_entries, summarize_month


def history_csv(profile: BrokerProfile) -> str:
    ledger = build_ledger(profile.initial_leads, profile.daily_entries)
    with_reason = any((e.discard_reason or "").strip() for e in ledger)

    out = StringIO()
    # BOM so spreadsheet apps pick up UTF-8.
    out.write("\ufeff")
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow([
        "date",
        "start_of_day_balance",
        *COUNTER_FIELDS,
        *(["discard_reason"] if with_reason else []),
        "end_of_day_balance",
    ])

    for e in ledger:
        writer.writerow([
            e.date.isoformat(),
            e.start_of_day_balance,
            *[getattr(e, name) or 0 for name in COUNTER_FIELDS],
            *([e.discard_reason or ""] if with_reason else []),
            e.end_of_day_balance,
        ])

    return out.getvalue()


def monthly_report_pdf(profile: BrokerProfile, year_month: str) -> bytes:
    settings = get_settings()
    ledger = build_ledger(profile.initial_leads, profile.daily_entries)
    summary = summarize_month(
        ledger,
        year_month,
        initial_leads=profile.initial_leads,
        monthly_sales_goal=profile.monthly_sales_goal,
    )
    rows = month_entries(ledger, year_month)
    with_reason = any((e.discard_reason or "").strip() for e in rows)

    buffer = BytesIO()
    p = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4
    y = height - 60
    p.setFont("Helvetica-Bold", 16)
    p.drawString(50, y, f"{settings.REPORT_TITLE} - {profile.broker_name} - {year_month}")
    y -= 36
    p.setFont("Helvetica", 11)

    goal = summary.monthly_sales_goal if summary.monthly_sales_goal else "N/A"
    progress = f"{summary.goal_progress}%" if summary.goal_progress is not None else "N/A"
    lines = [
        f"Opening balance: {summary.initial_leads_for_month}",
        f"New leads: {summary.new_leads}",
        f"Repique leads: {summary.repique_leads}",
        f"Signed: {summary.signed_leads}",
        f"Discarded: {summary.discarded_leads}",
        f"In negotiation: {summary.negotiation_leads}",
        f"Conversion rate: {summary.conversion_rate}%",
        f"Closing balance: {summary.final_leads_for_month}",
        f"Sales goal: {goal}",
        f"Goal progress: {progress}",
    ]
    for line in lines:
        p.drawString(50, y, line)
        y -= 18

    y -= 12
    p.setFont("Helvetica-Bold", 10)
    p.drawString(50, y, "Date        Start   New  Repique  Disc.  Neg.  Signed   End")
    y -= 16
    p.setFont("Helvetica", 10)
    for e in rows:
        if y < 60:
            p.showPage()
            p.setFont("Helvetica", 10)
            y = height - 60
        line = (
            f"{e.date.isoformat()}  {e.start_of_day_balance:>5}  {e.new_leads:>4}  {e.repique_leads or 0:>7}  "
            f"{e.discarded_leads:>5}  {e.negotiation_leads:>4}  {e.signed_leads:>6}  {e.end_of_day_balance:>5}"
        )
        if with_reason and (e.discard_reason or "").strip():
            line += f"  ({e.discard_reason.strip()})"
        p.drawString(50, y, line)
        y -= 14

    p.showPage()
    p.save()
    buffer.seek(0)
    return buffer.read()
