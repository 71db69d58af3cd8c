from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from leadledger.core.database import get_db
from leadledger.models.broker import Broker
from leadledger.schemas.ledger import BrokerProfile
from leadledger.services.editor import EntryEditor
from leadledger.services.sql_stores import SqlDraftCache, SqlEntryStore


def get_broker(broker_name: str, db: Session = Depends(get_db)) -> Broker:
    broker = db.query(Broker).filter(Broker.broker_name == broker_name).first()
    if not broker:
        raise HTTPException(status_code=404, detail="Broker not found")
    return broker


def get_editor(db: Session = Depends(get_db)) -> EntryEditor:
    return EntryEditor(SqlEntryStore(db), SqlDraftCache(db))


def get_profile(broker: Broker = Depends(get_broker), editor: EntryEditor = Depends(get_editor)) -> BrokerProfile:
    return editor.profile(broker.broker_name, broker.initial_leads, broker.monthly_sales_goal)
