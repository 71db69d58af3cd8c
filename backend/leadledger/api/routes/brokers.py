from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from leadledger.core.database import get_db
from leadledger.core.deps import get_broker, get_profile
from leadledger.models.broker import Broker
from leadledger.schemas.broker import BrokerCreate, BrokerResponse, BrokerUpdate
from leadledger.schemas.ledger import AllTimeStats, BrokerProfile, LedgerEntry, MonthlySummary
from leadledger.services.ledger import all_time_stats, build_ledger
from leadledger.services.summary import summarize_month

router = APIRouter(prefix="/brokers", tags=["brokers"])


@router.post("", response_model=BrokerResponse, status_code=201)
def create_broker(payload: BrokerCreate, db: Session = Depends(get_db)):
    existing = db.query(Broker).filter(Broker.broker_name == payload.broker_name).first()
    if existing:
        raise HTTPException(status_code=409, detail="Broker already exists")

    broker = Broker(**payload.model_dump())
    db.add(broker)
    db.commit()
    db.refresh(broker)
    return broker


@router.get("", response_model=list[BrokerResponse])
def list_brokers(db: Session = Depends(get_db)):
    return db.query(Broker).order_by(Broker.broker_name.asc()).all()


@router.get("/{broker_name}", response_model=BrokerProfile)
def read_broker(profile: BrokerProfile = Depends(get_profile)):
    return profile


@router.patch("/{broker_name}", response_model=BrokerResponse)
def update_broker(payload: BrokerUpdate, broker: Broker = Depends(get_broker), db: Session = Depends(get_db)):
    if payload.initial_leads is not None:
        broker.initial_leads = payload.initial_leads
    if "monthly_sales_goal" in payload.model_fields_set:
        broker.monthly_sales_goal = payload.monthly_sales_goal

    db.commit()
    db.refresh(broker)
    return broker


@router.get("/{broker_name}/ledger", response_model=list[LedgerEntry])
def read_ledger(order: str = "asc", profile: BrokerProfile = Depends(get_profile)):
    if order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail="order must be 'asc' or 'desc'")
    ledger = build_ledger(profile.initial_leads, profile.daily_entries)
    # Most recent first is a display choice; balances are always folded oldest first.
    if order == "desc":
        ledger.reverse()
    return ledger


@router.get("/{broker_name}/stats", response_model=AllTimeStats)
def read_stats(profile: BrokerProfile = Depends(get_profile)):
    return all_time_stats(profile.daily_entries)


@router.get("/{broker_name}/summary", response_model=MonthlySummary)
def read_month_summary(month: str, profile: BrokerProfile = Depends(get_profile)):
    ledger = build_ledger(profile.initial_leads, profile.daily_entries)
    return summarize_month(
        ledger,
        month,
        initial_leads=profile.initial_leads,
        monthly_sales_goal=profile.monthly_sales_goal,
    )
