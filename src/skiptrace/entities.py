from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar
from urllib.parse import quote

from . import fields

UNKNOWN_SOURCE = "Unknown"
STREET_VIEW_SOURCE = "Google Street View"
STREET_VIEW_URL = "https://maps.googleapis.com/maps/api/streetview?size=600x400&location={location}"
STREET_VIEW_ORDER = 999

ENTITY_TYPES: tuple[str, ...] = ("property", "address", "phone", "email", "person", "image")


@dataclass
class Entity:
    """One normalized fact extracted from a trace response."""

    type: ClassVar[str] = ""

    source: str = UNKNOWN_SOURCE
    category: str | None = None

    def is_meaningful(self) -> bool:
        return True

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        for key, value in asdict(self).items():
            if value is None:
                continue
            payload[key] = value
        return payload


@dataclass
class PropertyEntity(Entity):
    type: ClassVar[str] = "property"

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    beds: int | float | None = None
    baths: int | float | None = None
    sqft: int | float | None = None
    lot_size: str | None = None
    year_built: int | float | None = None
    property_type: str | None = None
    estimate: int | float | None = None


@dataclass
class AddressEntity(Entity):
    type: ClassVar[str] = "address"

    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal: str | None = None
    county: str | None = None
    date_range: str | None = None
    timespan: str | None = None

    def is_meaningful(self) -> bool:
        return bool(self.street or self.city)


@dataclass
class PhoneEntity(Entity):
    type: ClassVar[str] = "phone"

    number: str | None = None
    phone_type: str | None = None
    provider: str | None = None
    last_reported: str | None = None

    def is_meaningful(self) -> bool:
        return bool(self.number)


@dataclass
class EmailEntity(Entity):
    type: ClassVar[str] = "email"

    email: str | None = None

    def is_meaningful(self) -> bool:
        return bool(self.email and "@" in self.email)


@dataclass
class PersonEntity(Entity):
    type: ClassVar[str] = "person"

    name: str | None = None
    age: int | float | str | None = None
    born: str | None = None
    lives_in: str | None = None
    telephone: str | None = None
    person_link: str | None = None
    person_id: str | None = None

    def is_meaningful(self) -> bool:
        if self.category == "resident":
            return any(
                value not in (None, "")
                for value in (self.name, self.age, self.born, self.lives_in, self.telephone)
            )
        return bool(self.name)


@dataclass
class ImageEntity(Entity):
    type: ClassVar[str] = "image"

    url: str | None = None
    caption: str | None = None
    order: int | None = None

    def is_meaningful(self) -> bool:
        return bool(self.url)


def _age(record: Any) -> int | float | str | None:
    value = fields.lookup(record, "age")
    coerced = fields.to_number(value)
    if coerced is not None:
        return coerced
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def build_property(
    property_info: Any, address_info: Any, zestimate: Any, source: str
) -> PropertyEntity:
    return PropertyEntity(
        source=source,
        address=fields.optional_text(address_info, "full"),
        city=fields.optional_text(address_info, "city"),
        state=fields.optional_text(address_info, "state"),
        zip=fields.optional_text(address_info, "postal_code"),
        beds=fields.number(property_info, "beds"),
        baths=fields.number(property_info, "baths"),
        sqft=fields.number(property_info, "square_feet"),
        lot_size=fields.optional_text(property_info, "lot_size"),
        year_built=fields.number(property_info, "year_built"),
        property_type=fields.optional_text(property_info, "property_type"),
        estimate=fields.number(zestimate, "amount"),
    )


def _address(record: Any, source: str, category: str) -> AddressEntity:
    return AddressEntity(
        source=source,
        category=category,
        street=fields.optional_text(record, "street_address"),
        city=fields.optional_text(record, "address_locality"),
        state=fields.optional_text(record, "address_region"),
        postal=fields.optional_text(record, "postal_code"),
        county=fields.optional_text(record, "county"),
    )


def build_current_address(record: Any, source: str) -> AddressEntity:
    entity = _address(record, source, "current")
    entity.date_range = fields.optional_text(record, "date_range")
    return entity


def build_previous_address(record: Any, source: str) -> AddressEntity:
    entity = _address(record, source, "previous")
    entity.timespan = fields.optional_text(record, "timespan")
    return entity


def build_phone(record: Any, source: str) -> PhoneEntity:
    return PhoneEntity(
        source=source,
        number=fields.optional_text(record, "phone_number"),
        phone_type=fields.optional_text(record, "phone_type"),
        provider=fields.optional_text(record, "provider"),
        last_reported=fields.optional_text(record, "last_reported"),
    )


def build_email(value: Any, source: str) -> EmailEntity:
    if isinstance(value, str):
        email = value.strip() or None
    else:
        email = fields.optional_text(value, "email")
    return EmailEntity(source=source, email=email)


def build_resident(record: Any, source: str) -> PersonEntity:
    return PersonEntity(
        source=source,
        category="resident",
        name=fields.optional_text(record, "person_name"),
        age=_age(record),
        born=fields.optional_text(record, "born"),
        lives_in=fields.optional_text(record, "lives_in"),
        telephone=fields.optional_text(record, "telephone"),
    )


def _related_person(record: Any, source: str, category: str) -> PersonEntity:
    return PersonEntity(
        source=source,
        category=category,
        name=fields.optional_text(record, "name"),
        age=_age(record),
        person_link=fields.optional_text(record, "person_link"),
        person_id=fields.optional_text(record, "person_id"),
    )


def build_relative(record: Any, source: str) -> PersonEntity:
    return _related_person(record, source, "relative")


def build_associate(record: Any, source: str) -> PersonEntity:
    return _related_person(record, source, "associate")


def build_photo(record: Any, index: int, source: str) -> ImageEntity:
    if isinstance(record, str):
        url = record.strip() or None
        caption = None
    else:
        url = fields.optional_text(record, "url")
        caption = fields.optional_text(record, "caption")
    return ImageEntity(
        source=source,
        category="property_photo",
        url=url,
        caption=caption or f"Photo {index + 1}",
        order=index,
    )


def street_view_url(full_address: str) -> str:
    return STREET_VIEW_URL.format(location=quote(full_address, safe="~()*!.'"))


def build_street_view(full_address: str) -> ImageEntity:
    return ImageEntity(
        source=STREET_VIEW_SOURCE,
        category="street_view",
        url=street_view_url(full_address),
        caption="Street View",
        order=STREET_VIEW_ORDER,
    )
