from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.api.sessions import get_session_store
from src.api.skiptrace import get_skip_trace_client
from src.main import app
from src.skiptrace import PARSER_VERSION
from src.skiptrace.client import SearchParams, SkipTraceAPIError, SubscriptionRequiredError
from src.skiptrace.sessions import SessionStore
from src.skiptrace.storage import MemoryStorage

from .builders import person_detail_payload


class StubClient:
    def __init__(self, result: dict[str, Any] | Exception) -> None:
        self.result = result
        self.calls: list[tuple[str, SearchParams]] = []

    def execute(self, api_type: str, params: SearchParams) -> dict[str, Any]:
        self.calls.append((api_type, params))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(MemoryStorage())


@pytest.fixture
def client(store):
    app.dependency_overrides[get_session_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_stub(result: dict[str, Any] | Exception) -> StubClient:
    stub = StubClient(result)
    app.dependency_overrides[get_skip_trace_client] = lambda: stub
    return stub


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_parse_person_detail_returns_entities_and_developer_data(client):
    response = client.post("/skip-trace/person-detail/parse", json=person_detail_payload())
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "ProviderX"
    assert data["total_entities"] == 11
    assert data["entity_counts"]["persons"] == 3
    assert data["developer_data"]["emails"] == ["jane@example.com", "not-an-email"]
    assert data["parser_version"] == PARSER_VERSION


def test_parse_person_detail_accepts_non_object_bodies(client):
    response = client.post("/skip-trace/person-detail/parse", json=["odd"])
    assert response.status_code == 200
    data = response.json()
    assert data["entities"] == []
    assert data["developer_data"] is None
    assert data["warnings"] == ["Expected a JSON object, got list"]


def test_parse_person_search_response(client):
    response = client.post(
        "/skip-trace/person/parse",
        json={"Source": "ProviderX", "status": 404, "message": "No match"},
    )
    data = response.json()
    assert data["source"] == "ProviderX"
    assert data["status"] == 404
    assert data["person_details"] == []
    assert data["developer_data"] == {"status": 404, "message": "No match"}


def test_demo_uses_bundled_sample(client, monkeypatch):
    monkeypatch.delenv("SKIPTRACE_DEMO_JSON", raising=False)
    data = client.get("/skip-trace/demo").json()
    assert data["source"] == "Skip Tracing Working API"
    assert data["entity_counts"] == {
        "properties": 1,
        "addresses": 2,
        "phones": 1,
        "emails": 1,
        "persons": 3,
        "images": 3,
    }


def test_demo_prefers_configured_file(client, monkeypatch, tmp_path):
    sample = tmp_path / "demo.json"
    sample.write_text('{"Source": "Local", "Email Addresses": ["a@b.co"]}', encoding="utf-8")
    monkeypatch.setenv("SKIPTRACE_DEMO_JSON", str(sample))
    data = client.get("/skip-trace/demo").json()
    assert data["source"] == "Local"
    assert data["total_entities"] == 1


def test_demo_missing_sample_is_404(client, monkeypatch, tmp_path):
    monkeypatch.setenv("SKIPTRACE_DEMO_JSON", str(tmp_path / "absent.json"))
    monkeypatch.setattr("src.api.skiptrace.DEFAULT_DEMO_SAMPLE", tmp_path / "also-absent.json")
    assert client.get("/skip-trace/demo").status_code == 404


def test_search_returns_raw_and_parsed_views(client):
    stub = _use_stub({"PersonDetails": [{"Person_name": "Jane Doe"}], "status": 200})

    response = client.post("/skip-trace/search", json={"api_type": "name", "name": "Jane Doe"})

    assert response.status_code == 200
    data = response.json()
    assert data["search_query"] == "Jane Doe"
    assert data["raw_response"]["status"] == 200
    assert data["person"]["person_details"][0]["person_name"] == "Jane Doe"
    assert data["recorded_node_id"] is None
    assert stub.calls[0][0] == "name"


def test_address_search_query_joins_parts(client):
    stub = _use_stub({})
    response = client.post(
        "/skip-trace/search",
        json={"api_type": "address", "street": "1 Elm St", "citystatezip": "Ely, MN"},
    )
    assert response.json()["search_query"] == "1 Elm St, Ely, MN"
    assert stub.calls[0][1].citystatezip == "Ely, MN"


def test_search_records_node_in_current_session(client, store):
    store.create_session("canvass")
    _use_stub({"PeopleDetails": [{"Name": "A"}, {"Name": "B"}]})

    response = client.post(
        "/skip-trace/search", json={"api_type": "phone", "phone": "6125550100", "record": True}
    )

    node_id = response.json()["recorded_node_id"]
    assert node_id is not None
    (node,) = store.get_nodes()
    assert node.id == node_id
    assert node.api_name == "Skip Trace"
    assert store.get_entity_summary().persons == 2


def test_search_record_without_session_is_skipped(client, store):
    _use_stub({"status": 200})
    response = client.post(
        "/skip-trace/search", json={"api_type": "email", "email": "j@x.com", "record": True}
    )
    assert response.json()["recorded_node_id"] is None
    assert store.get_sessions() == []


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (ValueError("A name is required for a name search"), 422),
        (SubscriptionRequiredError("Name Search API error: 403 - not subscribed", 403), 402),
        (SkipTraceAPIError("Name Search API error: 500 - upstream down", 500), 502),
        (SkipTraceAPIError("Name Search request failed: timed out"), 502),
    ],
)
def test_search_error_mapping(client, error, status_code):
    _use_stub(error)
    response = client.post("/skip-trace/search", json={"api_type": "name"})
    assert response.status_code == status_code


def test_unknown_search_type_is_rejected(client):
    _use_stub({})
    response = client.post("/skip-trace/search", json={"api_type": "fax"})
    assert response.status_code == 422
