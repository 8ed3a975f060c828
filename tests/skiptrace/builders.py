from __future__ import annotations

from copy import deepcopy
from typing import Any

from src.skiptrace.sessions import NodeData


def person_detail_payload() -> dict[str, Any]:
    """Return a person-detail response touching every known section."""

    return {
        "Source": "ProviderX",
        "property": {
            "beds": "4",
            "baths": 2.5,
            "square_feet": "2,140",
            "lot_size": "0.31 acres",
            "year_built": "1994",
            "type": "Single Family",
        },
        "address": {
            "full": "123 Main St, Duluth, MN 55802",
            "city": "Duluth",
            "state": "MN",
            "postal_code": "55802",
        },
        "zestimate": {"amount": "$318,500"},
        "Current Address Details List": [
            {
                "street_address": "123 Main St",
                "address_locality": "Duluth",
                "address_region": "MN",
                "postal_code": "55802",
                "county": "St. Louis County",
                "date_range": "Mar 2019 - Oct 2024",
            }
        ],
        "Previous Address Details": [
            {
                "streetAddress": "88 Lake Ave",
                "addressLocality": "Two Harbors",
                "addressRegion": "MN",
                "postalCode": "55616",
                "county": "Lake County",
                "timespan": "2012 - 2019",
            }
        ],
        "All Phone Details": [
            {
                "phone_number": "(218) 555-0199",
                "phone_type": "Wireless",
                "last_reported": "Sep 2024",
                "provider": "Verizon",
            }
        ],
        "Email Addresses": ["jane@example.com", "not-an-email"],
        "Person Details": [
            {
                "Person_name": "Jane Doe",
                "Age": "34",
                "Born": "May 1990",
                "Lives in": "Duluth, MN",
                "Telephone": "(218) 555-0199",
            }
        ],
        "All Relatives": [
            {"Name": "John Doe", "Age": 61, "Person Link": "/p/jd1", "Person ID": "jd1"}
        ],
        "All Associates": [
            {"Name": "Sam Roe", "Age": "40", "Person Link": "/p/sr7", "Person ID": "sr7"}
        ],
        "photos": [
            {"url": "https://example.com/photos/front.jpg", "caption": "Front"},
            {"url": "https://example.com/photos/yard.jpg"},
        ],
    }


def person_search_payload() -> dict[str, Any]:
    return {
        "source": "Skip Tracing Working API",
        "status": "200",
        "message": "Success",
        "PersonDetails": [
            {"personName": "Jane Doe", "age": 34, "born": "May 1990", "livesIn": "Duluth, MN"}
        ],
        "emails": ["jane@example.com", "", None, "bogus"],
        "phones": [
            {"phoneNumber": "(218) 555-0199", "phoneType": "Wireless", "provider": "Verizon"},
            {"phoneType": "Landline"},
        ],
        "currentAddresses": [
            {
                "streetAddress": "123 Main St",
                "addressLocality": "Duluth",
                "addressRegion": "MN",
                "postalCode": "55802",
                "dateRange": "2019 - 2024",
            }
        ],
        "previousAddresses": [
            {
                "street_address": "88 Lake Ave",
                "address_locality": "Two Harbors",
                "timespan": "2012",
            },
            {"county": "Lake County"},
        ],
        "relatives": [{"Name": "John Doe", "Age": "61", "Person ID": "jd1"}, {"Age": "12"}],
        "associates": [{"name": "Sam Roe", "person_link": "/p/sr7"}],
    }


def duplicate_payload(payload: dict[str, Any]) -> dict[str, Any]:
    return deepcopy(payload)


def people_result_node(
    node_id: str, person_data: Any, timestamp: int = 1_700_000_000_000
) -> NodeData:
    return NodeData(
        id=node_id,
        type="people-result",
        timestamp=timestamp,
        api_name="Person Details",
        person_id="px1",
        person_data=person_data,
    )


def api_result_node(
    node_id: str, api_name: str, response: Any, timestamp: int = 1_700_000_000_000
) -> NodeData:
    return NodeData(
        id=node_id,
        type="api-result",
        timestamp=timestamp,
        api_name=api_name,
        response=response,
    )
