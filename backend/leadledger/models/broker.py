from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from leadledger.core.database import Base


class Broker(Base):
    __tablename__ = "broker_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    broker_name: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    initial_leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    monthly_sales_goal: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
