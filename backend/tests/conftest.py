from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from leadledger.core.database import Base, get_db
from leadledger.main import app
from leadledger.services.editor import EntryEditor
from leadledger.services.stores import InMemoryDraftCache, InMemoryEntryStore

TODAY = date(2024, 6, 15)


@pytest.fixture
def entry_store() -> InMemoryEntryStore:
    return InMemoryEntryStore()


@pytest.fixture
def draft_cache() -> InMemoryDraftCache:
    return InMemoryDraftCache()


@pytest.fixture
def editor(entry_store: InMemoryEntryStore, draft_cache: InMemoryDraftCache) -> EntryEditor:
    return EntryEditor(entry_store, draft_cache, today=lambda: TODAY)


@pytest.fixture
def db_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session: Session) -> Iterator[TestClient]:
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
