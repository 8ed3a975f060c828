from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

# Ordered key spellings per logical field. Upstream responses mix snake_case,
# PascalCase, camelCase and space-separated keys, sometimes within one payload.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "source": ("Source", "source", "SOURCE"),
    "status": ("status", "Status"),
    "message": ("message", "Message"),
    # person details
    "person_name": ("Person_name", "person_name", "Person Name", "personName", "PersonName"),
    "age": ("Age", "age"),
    "born": ("Born", "born"),
    "lives_in": ("Lives in", "lives_in", "livesIn", "LivesIn", "Lives_in"),
    "telephone": ("Telephone", "telephone"),
    # related persons
    "name": ("Name", "name"),
    "person_id": ("Person ID", "person_id", "personId", "PersonId", "PersonID"),
    "person_link": ("Person Link", "person_link", "personLink", "PersonLink"),
    # phones
    "phone_number": ("phone_number", "phoneNumber", "PhoneNumber", "Phone Number", "number"),
    "phone_type": ("phone_type", "phoneType", "PhoneType", "Phone Type"),
    "last_reported": ("last_reported", "lastReported", "LastReported", "Last Reported"),
    "provider": ("provider", "Provider"),
    # addresses
    "street_address": ("street_address", "streetAddress", "StreetAddress", "Street Address"),
    "address_locality": (
        "address_locality",
        "addressLocality",
        "AddressLocality",
        "Address Locality",
    ),
    "address_region": ("address_region", "addressRegion", "AddressRegion", "Address Region"),
    "postal_code": ("postal_code", "postalCode", "PostalCode", "Postal Code", "zip"),
    "county": ("county", "County"),
    "date_range": ("date_range", "dateRange", "DateRange", "Date Range"),
    "timespan": ("timespan", "Timespan", "time_span", "TimeSpan"),
    # property summary
    "full": ("full", "Full", "full_address", "fullAddress"),
    "city": ("city", "City"),
    "state": ("state", "State"),
    "beds": ("beds", "Beds", "bedrooms"),
    "baths": ("baths", "Baths", "bathrooms"),
    "square_feet": ("square_feet", "squareFeet", "SquareFeet", "sqft"),
    "lot_size": ("lot_size", "lotSize", "LotSize"),
    "year_built": ("year_built", "yearBuilt", "YearBuilt"),
    "property_type": ("type", "Type", "property_type", "propertyType"),
    "amount": ("amount", "Amount"),
    # photos
    "url": ("url", "Url", "URL", "href", "src"),
    "caption": ("caption", "Caption", "description"),
    # email records
    "email": ("email", "Email", "email_address", "emailAddress", "Email Address"),
}

# Section spellings for the array/object blocks of a response.
SECTION_ALIASES: dict[str, tuple[str, ...]] = {
    "current_addresses": (
        "Current Address Details List",
        "currentAddresses",
        "CurrentAddresses",
        "CurrentAddressDetailsList",
        "current_addresses",
    ),
    "previous_addresses": (
        "Previous Address Details",
        "previousAddresses",
        "PreviousAddresses",
        "PreviousAddressDetails",
        "previous_addresses",
    ),
    "phones": ("All Phone Details", "phones", "Phones", "AllPhoneDetails", "all_phone_details"),
    "emails": ("Email Addresses", "emails", "Emails", "EmailAddresses", "email_addresses"),
    "person_details": (
        "Person Details",
        "personDetails",
        "PersonDetails",
        "person_details",
    ),
    "relatives": ("All Relatives", "relatives", "Relatives", "AllRelatives", "all_relatives"),
    "associates": (
        "All Associates",
        "associates",
        "Associates",
        "AllAssociates",
        "all_associates",
    ),
    "photos": ("photos", "Photos", "images", "Images"),
    "people": ("people", "People", "PeopleDetails", "peopleDetails", "people_details"),
    # object-valued blocks
    "property": ("property", "Property"),
    "address": ("address", "Address"),
    "zestimate": ("zestimate", "Zestimate"),
}

_NUMERIC_NOISE = re.compile(r"[,$\s]")
_INTEGER = re.compile(r"[+-]?\d+")


def _canonical_key(key: str) -> str:
    return re.sub(r"[^a-z0-9]", "", key.lower())


def _lookup_keys(record: Any, keys: tuple[str, ...]) -> Any:
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    # Fall back to a spelling-insensitive match for keys not in the table.
    wanted = {_canonical_key(key) for key in keys}
    for key, value in record.items():
        if value is None or not isinstance(key, str):
            continue
        if _canonical_key(key) in wanted:
            return value
    return None


def lookup(record: Any, field: str) -> Any:
    """Return the first non-``None`` value for ``field`` under any known spelling."""

    return _lookup_keys(record, FIELD_ALIASES.get(field, (field,)))


def text(record: Any, field: str) -> str:
    value = lookup(record, field)
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def optional_text(record: Any, field: str) -> str | None:
    value = text(record, field)
    return value or None


def to_number(value: Any) -> int | float | None:
    """Coerce numbers and numeric strings; anything else becomes ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value
    if not isinstance(value, str):
        return None
    cleaned = _NUMERIC_NOISE.sub("", value)
    if not cleaned:
        return None
    if _INTEGER.fullmatch(cleaned):
        return int(cleaned)
    try:
        number_value = float(cleaned)
    except ValueError:
        return None
    if number_value != number_value or number_value in (float("inf"), float("-inf")):
        return None
    if number_value.is_integer() and "." not in cleaned and "e" not in cleaned.lower():
        return int(number_value)
    return number_value


def number(record: Any, field: str) -> int | float | None:
    return to_number(lookup(record, field))


def section(record: Any, name: str) -> list[Any]:
    value = _lookup_keys(record, SECTION_ALIASES.get(name, (name,)))
    if isinstance(value, list):
        return value
    return []


def block(record: Any, name: str) -> dict[str, Any]:
    value = _lookup_keys(record, SECTION_ALIASES.get(name, (name,)))
    if isinstance(value, Mapping):
        return dict(value)
    return {}
