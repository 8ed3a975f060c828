"""Run a skip-trace search or parse a saved person-detail payload.

Configure the RapidAPI key through the environment or command-line options and
print the normalized entities, one per line.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.skiptrace.client import API_TYPES, SearchParams, SkipTraceClient  # noqa: E402
from src.skiptrace.person_detail import parse_person_detail_response  # noqa: E402
from src.skiptrace.person_parser import parse_person_response  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a skip-trace lookup.")
    parser.add_argument(
        "--key",
        default=os.getenv("RAPIDAPI_KEY"),
        help="RapidAPI key. Defaults to RAPIDAPI_KEY.",
    )
    parser.add_argument("--type", choices=API_TYPES, default="name", help="Search type.")
    parser.add_argument("--query", help="Name, phone or email to search for.")
    parser.add_argument("--street", help="Street line for address searches.")
    parser.add_argument("--citystatezip", help="City/state/zip line for address searches.")
    parser.add_argument(
        "--file",
        help="Parse a saved person-detail JSON payload instead of calling the API.",
    )
    return parser.parse_args()


def _print_person_detail(path: Path) -> None:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    parsed = parse_person_detail_response(raw)
    print("--------Person detail from {}--------".format(parsed.source))
    for entity in parsed.entities:
        data = entity.as_dict()
        label = entity.type if not entity.category else f"{entity.type}/{entity.category}"
        details = ", ".join(f"{k}={v}" for k, v in data.items() if k not in {"type", "category"})
        print("...{}: {}".format(label, details))
    print("Counts: {}".format(parsed.entity_counts))


def main() -> None:
    args = parse_args()

    if args.file:
        path = Path(args.file)
        if not path.exists():
            raise SystemExit(f"Input file does not exist: {path}")
        _print_person_detail(path)
        return

    if not args.key:
        raise SystemExit("RapidAPI key is required. Set --key or RAPIDAPI_KEY.")

    params = SearchParams(street=args.street, citystatezip=args.citystatezip)
    if args.type in {"name", "phone", "email"}:
        setattr(params, args.type, args.query)

    client = SkipTraceClient(api_key=args.key)
    try:
        raw = client.execute(args.type, params)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    response = parse_person_response(raw)
    print(
        "--------{} search ({} / status {})--------".format(
            args.type, response.source, response.status
        )
    )
    for detail in response.person_details:
        print(
            "...Person: {} age {} lives in {}".format(
                detail.person_name, detail.age, detail.lives_in
            )
        )
    for phone in response.phones:
        print("...Phone: {} ({})".format(phone.phone_number, phone.phone_type))
    for email in response.emails:
        print("...Email: {}".format(email))
    for address in response.current_addresses:
        print("...Address: {}, {}".format(address.street_address, address.address_locality))
    print("--------------------------------------")


if __name__ == "__main__":
    main()
