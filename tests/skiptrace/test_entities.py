from __future__ import annotations

from src.skiptrace.entities import (
    STREET_VIEW_ORDER,
    UNKNOWN_SOURCE,
    AddressEntity,
    PersonEntity,
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


def test_property_builder_coerces_numeric_strings():
    entity = build_property(
        {"beds": "3", "baths": "2.5", "square_feet": "1,860", "year_built": "1978"},
        {"full": "1 Elm St, Ely, MN", "city": "Ely", "state": "MN", "postal_code": "55731"},
        {"amount": "$250,000"},
        "ProviderX",
    )
    assert entity.beds == 3
    assert entity.baths == 2.5
    assert entity.sqft == 1860
    assert entity.year_built == 1978
    assert entity.estimate == 250000
    assert entity.address == "1 Elm St, Ely, MN"
    assert entity.zip == "55731"


def test_missing_fields_stay_none_and_are_omitted():
    entity = build_property({"beds": 2}, {}, {}, "ProviderX")
    assert entity.baths is None
    assert entity.estimate is None
    payload = entity.as_dict()
    assert payload == {"type": "property", "source": "ProviderX", "beds": 2}


def test_current_and_previous_addresses_carry_their_own_period():
    current = build_current_address(
        {"street_address": "1 Elm St", "address_locality": "Ely", "date_range": "2020 - 2024"},
        "ProviderX",
    )
    previous = build_previous_address(
        {"streetAddress": "9 Oak Ave", "addressLocality": "Mora", "timespan": "2010 - 2020"},
        "ProviderX",
    )
    assert current.category == "current"
    assert current.date_range == "2020 - 2024"
    assert current.timespan is None
    assert previous.category == "previous"
    assert previous.timespan == "2010 - 2020"
    assert previous.date_range is None


def test_address_is_meaningful_with_street_or_locality():
    assert AddressEntity(street="1 Elm St").is_meaningful()
    assert AddressEntity(city="Ely").is_meaningful()
    assert not AddressEntity(state="MN", postal="55731").is_meaningful()


def test_phone_requires_number():
    assert build_phone({"phoneNumber": "612-555-0100"}, "X").is_meaningful()
    assert not build_phone({"phone_type": "Wireless"}, "X").is_meaningful()


def test_email_requires_at_sign():
    assert build_email("jane@example.com", "X").is_meaningful()
    assert not build_email("not-an-email", "X").is_meaningful()
    assert not build_email("", "X").is_meaningful()
    assert build_email({"Email": "sam@example.com"}, "X").email == "sam@example.com"


def test_resident_keeps_non_numeric_age_as_text():
    numeric = build_resident({"Person_name": "Jane Doe", "Age": "34"}, "X")
    textual = build_resident({"Person_name": "Jane Doe", "Age": "30s"}, "X")
    assert numeric.age == 34
    assert textual.age == "30s"


def test_resident_is_meaningful_with_any_detail():
    assert build_resident({"Born": "1980"}, "X").is_meaningful()
    assert not build_resident({"Person_name": "", "Age": None}, "X").is_meaningful()


def test_related_persons_require_name():
    relative = build_relative({"Name": "John Doe", "Person ID": "jd1"}, "X")
    associate = build_associate({"Age": "40"}, "X")
    assert relative.category == "relative"
    assert relative.person_id == "jd1"
    assert relative.is_meaningful()
    assert associate.category == "associate"
    assert not associate.is_meaningful()
    assert not PersonEntity(category="relative", age=40).is_meaningful()


def test_photo_defaults_caption_and_keeps_index_order():
    photo = build_photo({"url": "https://example.com/a.jpg"}, 2, "X")
    assert photo.caption == "Photo 3"
    assert photo.order == 2
    assert photo.category == "property_photo"
    from_string = build_photo("https://example.com/b.jpg", 0, "X")
    assert from_string.url == "https://example.com/b.jpg"


def test_street_view_is_ordered_last_and_url_encoded():
    image = build_street_view("123 Main St, City, MN")
    assert image.order == STREET_VIEW_ORDER == 999
    assert image.category == "street_view"
    assert image.url is not None
    assert image.url.endswith("location=123%20Main%20St%2C%20City%2C%20MN")


def test_entity_dict_always_has_type_and_source():
    payload = AddressEntity().as_dict()
    assert payload["type"] == "address"
    assert payload["source"] == UNKNOWN_SOURCE
