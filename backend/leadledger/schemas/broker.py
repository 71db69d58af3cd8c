from datetime import datetime

from pydantic import BaseModel, Field


class BrokerCreate(BaseModel):
    broker_name: str = Field(min_length=1, max_length=120)
    initial_leads: int = 0
    monthly_sales_goal: int | None = Field(default=None, gt=0)


class BrokerUpdate(BaseModel):
    initial_leads: int | None = None
    monthly_sales_goal: int | None = Field(default=None, gt=0)


class BrokerResponse(BaseModel):
    id: int
    broker_name: str
    initial_leads: int
    monthly_sales_goal: int | None
    created_at: datetime

    class Config:
        from_attributes = True
