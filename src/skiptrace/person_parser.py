from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from . import fields
from .entities import UNKNOWN_SOURCE

DEFAULT_STATUS = 200


@dataclass
class PersonDetails:
    person_name: str = ""
    age: str = ""
    born: str = ""
    lives_in: str = ""
    telephone: str = ""

    def is_empty(self) -> bool:
        return not any((self.person_name, self.age, self.born, self.lives_in, self.telephone))


@dataclass
class PhoneDetails:
    phone_number: str = ""
    phone_type: str = ""
    provider: str = ""
    last_reported: str = ""


@dataclass
class Address:
    street_address: str = ""
    address_locality: str = ""
    address_region: str = ""
    postal_code: str = ""
    county: str = ""
    date_range: str | None = None
    timespan: str | None = None


@dataclass
class RelatedPerson:
    name: str = ""
    age: str = ""
    person_id: str = ""
    person_link: str = ""


@dataclass
class PersonResponse:
    source: str = UNKNOWN_SOURCE
    status: int = DEFAULT_STATUS
    message: str = ""
    person_details: list[PersonDetails] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    phones: list[PhoneDetails] = field(default_factory=list)
    current_addresses: list[Address] = field(default_factory=list)
    previous_addresses: list[Address] = field(default_factory=list)
    relatives: list[RelatedPerson] = field(default_factory=list)
    associates: list[RelatedPerson] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _status(record: Any) -> int:
    value = fields.lookup(record, "status")
    if isinstance(value, bool):
        return DEFAULT_STATUS
    if isinstance(value, int):
        return value
    coerced = fields.to_number(value)
    if coerced is None:
        return DEFAULT_STATUS
    return int(coerced)


def parse_person_details(items: list[Any]) -> list[PersonDetails]:
    details = [
        PersonDetails(
            person_name=fields.text(item, "person_name"),
            age=fields.text(item, "age"),
            born=fields.text(item, "born"),
            lives_in=fields.text(item, "lives_in"),
            telephone=fields.text(item, "telephone"),
        )
        for item in items
    ]
    return [detail for detail in details if not detail.is_empty()]


def parse_emails(items: list[Any]) -> list[str]:
    emails: list[str] = []
    for item in items:
        if isinstance(item, str):
            value = item.strip()
        else:
            value = fields.text(item, "email")
        if "@" in value:
            emails.append(value)
    return emails


def parse_phones(items: list[Any]) -> list[PhoneDetails]:
    phones = [
        PhoneDetails(
            phone_number=fields.text(item, "phone_number"),
            phone_type=fields.text(item, "phone_type"),
            provider=fields.text(item, "provider"),
            last_reported=fields.text(item, "last_reported"),
        )
        for item in items
    ]
    return [phone for phone in phones if phone.phone_number]


def parse_addresses(items: list[Any]) -> list[Address]:
    addresses = [
        Address(
            street_address=fields.text(item, "street_address"),
            address_locality=fields.text(item, "address_locality"),
            address_region=fields.text(item, "address_region"),
            postal_code=fields.text(item, "postal_code"),
            county=fields.text(item, "county"),
            date_range=fields.optional_text(item, "date_range"),
            timespan=fields.optional_text(item, "timespan"),
        )
        for item in items
    ]
    return [addr for addr in addresses if addr.street_address or addr.address_locality]


def parse_related_persons(items: list[Any]) -> list[RelatedPerson]:
    persons = [
        RelatedPerson(
            name=fields.text(item, "name"),
            age=fields.text(item, "age"),
            person_id=fields.text(item, "person_id"),
            person_link=fields.text(item, "person_link"),
        )
        for item in items
    ]
    return [person for person in persons if person.name]


def parse_person_response(raw: Any) -> PersonResponse:
    """Parse the person-search response shape.

    Never raises. String fields default to ``""``, ``status`` to 200 and
    ``source`` to ``"Unknown"``.
    """

    record = raw if isinstance(raw, Mapping) else {}
    return PersonResponse(
        source=fields.text(record, "source") or UNKNOWN_SOURCE,
        status=_status(record),
        message=fields.text(record, "message"),
        person_details=parse_person_details(fields.section(record, "person_details")),
        emails=parse_emails(fields.section(record, "emails")),
        phones=parse_phones(fields.section(record, "phones")),
        current_addresses=parse_addresses(fields.section(record, "current_addresses")),
        previous_addresses=parse_addresses(fields.section(record, "previous_addresses")),
        relatives=parse_related_persons(fields.section(record, "relatives")),
        associates=parse_related_persons(fields.section(record, "associates")),
    )
