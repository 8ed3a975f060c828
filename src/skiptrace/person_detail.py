from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from . import fields
from .entities import (
    UNKNOWN_SOURCE,
    Entity,
    build_associate,
    build_current_address,
    build_email,
    build_phone,
    build_photo,
    build_previous_address,
    build_property,
    build_relative,
    build_resident,
    build_street_view,
)

logger = logging.getLogger(__name__)

# entity type -> key in ``entity_counts``
COUNT_KEYS: dict[str, str] = {
    "property": "properties",
    "address": "addresses",
    "phone": "phones",
    "email": "emails",
    "person": "persons",
    "image": "images",
}

_RECORD_SECTIONS: tuple[tuple[str, Callable[[Any, str], Entity]], ...] = (
    ("current_addresses", build_current_address),
    ("previous_addresses", build_previous_address),
    ("phones", build_phone),
    ("emails", build_email),
    ("person_details", build_resident),
    ("relatives", build_relative),
    ("associates", build_associate),
)


def empty_counts() -> dict[str, int]:
    return {key: 0 for key in COUNT_KEYS.values()}


def count_entities(entities: list[Entity]) -> dict[str, int]:
    counts = empty_counts()
    for entity in entities:
        counts[COUNT_KEYS[entity.type]] += 1
    return counts


@dataclass
class ParsedPersonDetailData:
    entities: list[Entity]
    entity_counts: dict[str, int]
    raw_response: Any
    source: str = UNKNOWN_SOURCE
    warnings: list[str] = field(default_factory=list)

    @property
    def total_entities(self) -> int:
        return len(self.entities)

    def as_dict(self) -> dict[str, Any]:
        return {
            "entities": [entity.as_dict() for entity in self.entities],
            "total_entities": self.total_entities,
            "entity_counts": dict(self.entity_counts),
            "raw_response": self.raw_response,
            "source": self.source,
            "warnings": list(self.warnings),
        }


def response_source(raw: Any) -> str:
    source = fields.text(raw, "source")
    return source or UNKNOWN_SOURCE


def parse_person_detail_response(raw: Any) -> ParsedPersonDetailData:
    """Normalize a person-detail payload into a flat entity list.

    This function is total: it never raises, whatever ``raw`` holds. Sections
    that are missing or not lists are treated as empty, degenerate records are
    dropped, and ``raw`` is kept untouched on the result as ``raw_response``.
    """

    record = raw if isinstance(raw, Mapping) else {}
    warnings: list[str] = []
    if raw is not None and not isinstance(raw, Mapping):
        warnings.append(f"Expected a JSON object, got {type(raw).__name__}")
        logger.warning("Person detail payload is not an object: %s", type(raw).__name__)

    source = response_source(record)
    entities: list[Entity] = []

    property_info = fields.block(record, "property")
    address_info = fields.block(record, "address")
    if property_info:
        entities.append(
            build_property(property_info, address_info, fields.block(record, "zestimate"), source)
        )

    for section_name, builder in _RECORD_SECTIONS:
        dropped = 0
        for item in fields.section(record, section_name):
            entity = builder(item, source)
            if entity.is_meaningful():
                entities.append(entity)
            else:
                dropped += 1
        if dropped:
            logger.debug("Dropped %d empty %s record(s)", dropped, section_name)

    for index, photo in enumerate(fields.section(record, "photos")):
        image = build_photo(photo, index, source)
        if image.is_meaningful():
            entities.append(image)

    full_address = fields.optional_text(address_info, "full")
    if full_address:
        entities.append(build_street_view(full_address))

    return ParsedPersonDetailData(
        entities=entities,
        entity_counts=count_entities(entities),
        raw_response=raw,
        source=source,
        warnings=warnings,
    )


def entities_from_parsed(parsed: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Return the entity dicts of an already-parsed payload (``as_dict`` shape)."""

    raw_entities = parsed.get("entities")
    if not isinstance(raw_entities, list):
        return []
    return [entity for entity in raw_entities if isinstance(entity, Mapping) and entity.get("type")]


def is_parsed_payload(payload: Any) -> bool:
    return isinstance(payload, Mapping) and isinstance(payload.get("entities"), list)
