from __future__ import annotations

from datetime import date, timedelta

from fastapi.testclient import TestClient

from leadledger.core.deps import get_editor
from leadledger.core.errors import StoreUnavailable
from leadledger.main import app
from leadledger.schemas.ledger import DailyEntry
from leadledger.services.editor import EntryEditor
from leadledger.services.stores import InMemoryDraftCache, InMemoryEntryStore

API = "/api/v1"
BROKER = "Ana Souza"


def _create_broker(client: TestClient, initial_leads: int = 10, goal: int | None = None) -> None:
    res = client.post(
        f"{API}/brokers",
        json={"broker_name": BROKER, "initial_leads": initial_leads, "monthly_sales_goal": goal},
    )
    assert res.status_code == 201, res.text


def _commit(client: TestClient, day: str, **fields) -> None:
    res = client.put(f"{API}/brokers/{BROKER}/entries/{day}", json=fields)
    assert res.status_code == 200, res.text


def test_health(client: TestClient) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
    assert res.headers["x-request-id"]


def test_broker_crud(client: TestClient) -> None:
    _create_broker(client)

    assert client.post(f"{API}/brokers", json={"broker_name": BROKER}).status_code == 409
    assert [b["broker_name"] for b in client.get(f"{API}/brokers").json()] == [BROKER]

    res = client.patch(f"{API}/brokers/{BROKER}", json={"initial_leads": 4, "monthly_sales_goal": 8})
    assert res.status_code == 200
    assert res.json()["initial_leads"] == 4
    assert res.json()["monthly_sales_goal"] == 8

    profile = client.get(f"{API}/brokers/{BROKER}").json()
    assert profile["initial_leads"] == 4
    assert profile["daily_entries"] == []


def test_unknown_broker_is_404(client: TestClient) -> None:
    assert client.get(f"{API}/brokers/nobody/ledger").status_code == 404
    assert client.put(f"{API}/brokers/nobody/entries/2024-05-01", json={}).status_code == 404


def test_ledger_and_month_summary(client: TestClient) -> None:
    _create_broker(client, goal=4)
    _commit(client, "2024-05-02", new_leads=0, signed_leads=1, discarded_leads=0)
    _commit(client, "2024-05-01", new_leads=5, signed_leads=2, discarded_leads=1)

    ledger = client.get(f"{API}/brokers/{BROKER}/ledger").json()
    assert [(e["date"], e["start_of_day_balance"], e["end_of_day_balance"]) for e in ledger] == [
        ("2024-05-01", 10, 12),
        ("2024-05-02", 12, 11),
    ]

    newest_first = client.get(f"{API}/brokers/{BROKER}/ledger", params={"order": "desc"}).json()
    assert [e["date"] for e in newest_first] == ["2024-05-02", "2024-05-01"]

    summary = client.get(f"{API}/brokers/{BROKER}/summary", params={"month": "2024-05"}).json()
    assert summary["initial_leads_for_month"] == 10
    assert summary["final_leads_for_month"] == 11
    assert summary["conversion_rate"] == 60.0
    assert summary["goal_progress"] == 75

    stats = client.get(f"{API}/brokers/{BROKER}/stats").json()
    assert stats == {"total_received": 5, "total_discarded": 1}


def test_bad_month_is_422(client: TestClient) -> None:
    _create_broker(client)
    res = client.get(f"{API}/brokers/{BROKER}/summary", params={"month": "2024-13"})
    assert res.status_code == 422


def test_draft_round_trip_and_commit(client: TestClient) -> None:
    _create_broker(client)
    _commit(client, "2024-05-01", new_leads=2)

    res = client.put(f"{API}/brokers/{BROKER}/drafts/2024-05-01", json={"new_leads": 6})
    assert res.status_code == 204

    state = client.get(f"{API}/brokers/{BROKER}/entries/2024-05-01").json()
    assert state["is_draft"] is True
    assert state["data"]["new_leads"] == 6

    _commit(client, "2024-05-01", new_leads=6, discarded_leads=0, discard_reason="typo")
    state = client.get(f"{API}/brokers/{BROKER}/entries/2024-05-01").json()
    assert state["is_draft"] is False
    assert state["data"]["discard_reason"] == ""


def test_commit_validation_errors(client: TestClient) -> None:
    _create_broker(client)

    res = client.put(f"{API}/brokers/{BROKER}/entries/2024-05-01", json={"discarded_leads": -1})
    assert res.status_code == 422
    assert "discarded_leads must be a non-negative integer" in res.json()["detail"]

    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    res = client.put(f"{API}/brokers/{BROKER}/entries/{tomorrow}", json={"new_leads": 1})
    assert res.status_code == 422

    assert client.get(f"{API}/brokers/{BROKER}/ledger").json() == []


def test_delete_entry(client: TestClient) -> None:
    _create_broker(client)
    _commit(client, "2024-05-01", new_leads=2)

    assert client.delete(f"{API}/brokers/{BROKER}/entries/2024-05-01").status_code == 204
    assert client.get(f"{API}/brokers/{BROKER}/ledger").json() == []


def test_bulk_commit(client: TestClient) -> None:
    _create_broker(client)
    _commit(client, "2024-05-01", new_leads=5, discarded_leads=1, discard_reason="duplicate")

    res = client.post(
        f"{API}/brokers/{BROKER}/entries/bulk",
        json={"start_date": "2024-05-01", "end_date": "2024-05-03", "overrides": {"signed_leads": 2}},
    )
    assert res.status_code == 200, res.text
    assert res.json()["applied_dates"] == ["2024-05-01", "2024-05-02", "2024-05-03"]

    entries = client.get(f"{API}/brokers/{BROKER}").json()["daily_entries"]
    assert [e["signed_leads"] for e in entries] == [2, 2, 2]
    assert entries[0]["new_leads"] == 5
    assert entries[0]["discard_reason"] == "duplicate"
    assert entries[1]["new_leads"] == 0

    res = client.post(
        f"{API}/brokers/{BROKER}/entries/bulk",
        json={"start_date": "2024-05-03", "end_date": "2024-05-01"},
    )
    assert res.status_code == 422


def test_history_csv(client: TestClient) -> None:
    _create_broker(client)
    assert client.get(f"{API}/brokers/{BROKER}/reports/history.csv").status_code == 404

    _commit(client, "2024-05-01", new_leads=5, signed_leads=2, discarded_leads=1, discard_reason='said "no"')
    _commit(client, "2024-05-02", signed_leads=1)

    res = client.get(f"{API}/brokers/{BROKER}/reports/history.csv")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "history-Ana_Souza.csv" in res.headers["content-disposition"]

    lines = res.content.decode("utf-8-sig").splitlines()
    assert lines[0].split(",")[-2:] == ["discard_reason", "end_of_day_balance"]
    assert lines[1].startswith("2024-05-01,10,5,1,0,")
    assert lines[1].endswith(',"said ""no""",12')
    assert lines[2].endswith(",,11")


def test_monthly_pdf(client: TestClient) -> None:
    _create_broker(client, goal=3)
    _commit(client, "2024-05-01", new_leads=5, signed_leads=2)

    res = client.get(f"{API}/brokers/{BROKER}/reports/2024-05.pdf")
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content.startswith(b"%PDF")

    assert client.get(f"{API}/brokers/{BROKER}/reports/2024-5.pdf").status_code == 422


class _FailingStore(InMemoryEntryStore):
    def __init__(self, fail_on: date | None = None):
        super().__init__()
        self.fail_on = fail_on

    def upsert(self, broker_key: str, entry: DailyEntry) -> None:
        if self.fail_on is None or entry.date == self.fail_on:
            raise StoreUnavailable("database is locked")
        super().upsert(broker_key, entry)


def _use_store(store: InMemoryEntryStore) -> None:
    app.dependency_overrides[get_editor] = lambda: EntryEditor(store, InMemoryDraftCache())


def test_interrupted_bulk_commit_is_503_with_progress(client: TestClient) -> None:
    _create_broker(client)
    _use_store(_FailingStore(fail_on=date(2024, 5, 2)))

    res = client.post(
        f"{API}/brokers/{BROKER}/entries/bulk",
        json={"start_date": "2024-05-01", "end_date": "2024-05-03", "overrides": {"new_leads": 1}},
    )

    assert res.status_code == 503
    body = res.json()
    assert body["applied_dates"] == ["2024-05-01"]
    assert body["failed_date"] == "2024-05-02"
    assert body["detail"]


def test_store_failure_on_commit_is_503(client: TestClient) -> None:
    _create_broker(client)
    _use_store(_FailingStore())

    res = client.put(f"{API}/brokers/{BROKER}/entries/2024-05-01", json={"new_leads": 1})

    assert res.status_code == 503
    assert "database is locked" in res.json()["detail"]


def test_boolean_counter_is_422(client: TestClient) -> None:
    _create_broker(client)

    res = client.put(f"{API}/brokers/{BROKER}/entries/2024-05-01", json={"new_leads": True})
    assert res.status_code == 422

    res = client.post(
        f"{API}/brokers/{BROKER}/entries/bulk",
        json={"start_date": "2024-05-01", "end_date": "2024-05-02", "overrides": {"signed_leads": True}},
    )
    assert res.status_code == 422

    assert client.get(f"{API}/brokers/{BROKER}/ledger").json() == []
