from datetime import date

from fastapi import APIRouter, Depends, Response

from leadledger.core.deps import get_broker, get_editor
from leadledger.models.broker import Broker
from leadledger.schemas.ledger import BulkCommitRequest, BulkCommitResult, DailyEntry, EditState, EntryFields
from leadledger.services.editor import EntryEditor

router = APIRouter(prefix="/brokers/{broker_name}", tags=["entries"])


@router.get("/entries/{entry_date}", response_model=EditState)
def read_edit_state(
    entry_date: date,
    broker: Broker = Depends(get_broker),
    editor: EntryEditor = Depends(get_editor),
):
    return editor.load_edit_state(broker.broker_name, entry_date)


@router.put("/drafts/{entry_date}", status_code=204)
def save_draft(
    entry_date: date,
    payload: EntryFields,
    broker: Broker = Depends(get_broker),
    editor: EntryEditor = Depends(get_editor),
):
    editor.save_draft(broker.broker_name, entry_date, payload)
    return Response(status_code=204)


@router.put("/entries/{entry_date}", response_model=DailyEntry)
def commit_entry(
    entry_date: date,
    payload: EntryFields,
    broker: Broker = Depends(get_broker),
    editor: EntryEditor = Depends(get_editor),
):
    return editor.commit_entry(broker.broker_name, entry_date, payload)


@router.delete("/entries/{entry_date}", status_code=204)
def delete_entry(
    entry_date: date,
    broker: Broker = Depends(get_broker),
    editor: EntryEditor = Depends(get_editor),
):
    editor.delete_entry(broker.broker_name, entry_date)
    return Response(status_code=204)


@router.post("/entries/bulk", response_model=BulkCommitResult)
def commit_bulk(
    payload: BulkCommitRequest,
    broker: Broker = Depends(get_broker),
    editor: EntryEditor = Depends(get_editor),
):
    return editor.commit_bulk(broker.broker_name, payload.start_date, payload.end_date, payload.overrides)
