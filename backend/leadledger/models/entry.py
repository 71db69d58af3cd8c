from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from leadledger.core.database import Base


class DailyEntryRecord(Base):
    __tablename__ = "daily_entries"
    __table_args__ = (UniqueConstraint("broker_name", "entry_date", name="uq_daily_entries_broker_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    broker_name: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)

    new_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    discarded_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Nullable: rows written before repique tracking have no value.
    repique_leads: Mapped[int | None] = mapped_column(Integer)
    local_visits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    contacting_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    in_progress_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    scheduled_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    negotiation_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    credit_analysis_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    approved_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    signed_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    discard_reason: Mapped[str] = mapped_column(Text, default="", nullable=False)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class EntryDraft(Base):
    __tablename__ = "entry_drafts"
    __table_args__ = (UniqueConstraint("broker_name", "entry_date", name="uq_entry_drafts_broker_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    broker_name: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    # JSON object of the form fields, as last typed.
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
