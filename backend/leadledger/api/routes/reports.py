from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from leadledger.core.deps import get_profile
from leadledger.schemas.ledger import BrokerProfile
from leadledger.services.reports import history_csv, monthly_report_pdf
from leadledger.services.summary import parse_year_month

router = APIRouter(prefix="/brokers/{broker_name}/reports", tags=["reports"])


def _file_stem(profile: BrokerProfile) -> str:
    return "_".join(profile.broker_name.split())


@router.get("/history.csv")
def export_history_csv(profile: BrokerProfile = Depends(get_profile)):
    if not profile.daily_entries:
        raise HTTPException(status_code=404, detail="No entries to export")

    csv_data = history_csv(profile)
    return Response(
        content=csv_data,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename=history-{_file_stem(profile)}.csv"},
    )


@router.get("/{month}.pdf")
def export_month_pdf(month: str, profile: BrokerProfile = Depends(get_profile)):
    parse_year_month(month)
    pdf = monthly_report_pdf(profile, month)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=report-{_file_stem(profile)}-{month}.pdf"},
    )
