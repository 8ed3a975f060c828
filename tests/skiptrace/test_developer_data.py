from __future__ import annotations

from src.skiptrace.developer_data import extract_developer_data

from .builders import person_detail_payload


def test_extracts_known_sections_under_canonical_names():
    payload = person_detail_payload()
    data = extract_developer_data(payload)
    assert data is not None
    assert data["personDetails"] == payload["Person Details"]
    assert data["emails"] == payload["Email Addresses"]
    assert data["phones"] == payload["All Phone Details"]
    assert data["currentAddresses"] == payload["Current Address Details List"]
    assert data["previousAddresses"] == payload["Previous Address Details"]
    assert data["relatives"] == payload["All Relatives"]
    assert data["associates"] == payload["All Associates"]
    assert "status" not in data


def test_status_message_and_result_lists():
    data = extract_developer_data(
        {"status": 0, "Message": "No records", "data": [], "results": [{"id": 1}]}
    )
    assert data == {"status": 0, "message": "No records", "data": [], "results": [{"id": 1}]}


def test_returns_none_when_nothing_is_recognized():
    assert extract_developer_data({}) is None
    assert extract_developer_data({"unrelated": True}) is None
    assert extract_developer_data(["list"]) is None
    assert extract_developer_data({"data": "not-a-list"}) is None


def test_result_lists_are_read_by_exact_key_only():
    assert extract_developer_data({"Data": [1], "Results": [2]}) is None
