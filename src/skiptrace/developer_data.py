from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from . import fields

# output key -> section alias group
_DEVELOPER_SECTIONS: dict[str, str] = {
    "personDetails": "person_details",
    "emails": "emails",
    "phones": "phones",
    "currentAddresses": "current_addresses",
    "previousAddresses": "previous_addresses",
    "relatives": "relatives",
    "associates": "associates",
}


def extract_developer_data(raw: Any) -> dict[str, Any] | None:
    """Pull the structured sections a developer would consume out of a raw response.

    Returns ``None`` when nothing recognizable is present.
    """

    if not isinstance(raw, Mapping):
        return None
    parsed: dict[str, Any] = {}
    for output_key, alias_group in _DEVELOPER_SECTIONS.items():
        value = fields.section(raw, alias_group)
        if value:
            parsed[output_key] = value
    if raw.get("status") is not None:
        parsed["status"] = raw["status"]
    message = fields.lookup(raw, "message")
    if message:
        parsed["message"] = message
    for key in ("data", "results"):
        if isinstance(raw.get(key), list):
            parsed[key] = raw[key]
    return parsed or None
