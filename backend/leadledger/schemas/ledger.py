import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# Pipeline stage counters, in the order they are shown and exported.
COUNTER_FIELDS: tuple[str, ...] = (
    "new_leads",
    "discarded_leads",
    "repique_leads",
    "local_visits",
    "contacting_leads",
    "in_progress_leads",
    "scheduled_leads",
    "negotiation_leads",
    "credit_analysis_leads",
    "approved_leads",
    "signed_leads",
)


class EntryFields(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    new_leads: StrictInt = 0
    discarded_leads: StrictInt = 0
    # None on records written before repique tracking existed; read as 0.
    repique_leads: StrictInt | None = 0
    local_visits: StrictInt = 0
    contacting_leads: StrictInt = 0
    in_progress_leads: StrictInt = 0
    scheduled_leads: StrictInt = 0
    negotiation_leads: StrictInt = 0
    credit_analysis_leads: StrictInt = 0
    approved_leads: StrictInt = 0
    signed_leads: StrictInt = 0
    discard_reason: str = ""

    def to_fields(self) -> "EntryFields":
        return EntryFields.model_validate(self.model_dump(include=set(EntryFields.model_fields)))


class DailyEntry(EntryFields):
    date: datetime.date


class LedgerEntry(DailyEntry):
    start_of_day_balance: int
    end_of_day_balance: int


class BrokerProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    broker_name: str
    initial_leads: int = 0
    monthly_sales_goal: int | None = None
    daily_entries: list[DailyEntry] = Field(default_factory=list)


class MonthlySummary(BaseModel):
    year_month: str
    initial_leads_for_month: int
    final_leads_for_month: int
    new_leads: int = 0
    repique_leads: int = 0
    signed_leads: int = 0
    discarded_leads: int = 0
    negotiation_leads: int = 0
    total_leads_in: int = 0
    conversion_rate: float = 0.0
    entry_count: int = 0
    monthly_sales_goal: int | None = None
    goal_progress: int | None = None


class AllTimeStats(BaseModel):
    total_received: int
    total_discarded: int


class EditState(BaseModel):
    data: EntryFields
    is_draft: bool


class BulkOverrides(BaseModel):
    """Sparse counter overrides for a bulk edit. None leaves the field untouched."""

    new_leads: StrictInt | None = None
    discarded_leads: StrictInt | None = None
    repique_leads: StrictInt | None = None
    local_visits: StrictInt | None = None
    contacting_leads: StrictInt | None = None
    in_progress_leads: StrictInt | None = None
    scheduled_leads: StrictInt | None = None
    negotiation_leads: StrictInt | None = None
    credit_analysis_leads: StrictInt | None = None
    approved_leads: StrictInt | None = None
    signed_leads: StrictInt | None = None

    def specified(self) -> dict[str, int]:
        return {name: value for name, value in self.model_dump().items() if value is not None}


class BulkCommitResult(BaseModel):
    applied_dates: list[datetime.date]


class BulkCommitRequest(BaseModel):
    start_date: datetime.date
    end_date: datetime.date
    overrides: BulkOverrides = Field(default_factory=BulkOverrides)
