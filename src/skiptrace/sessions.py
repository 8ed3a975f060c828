from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from jsonschema import Draft202012Validator

from . import fields
from .person_detail import entities_from_parsed, is_parsed_payload, parse_person_detail_response
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

SESSIONS_KEY = "mnuda_sessions"
CURRENT_SESSION_KEY = "mnuda_current_session"
SESSION_SCHEMA_PATH = "schema/session_store_v1.json"

NODE_TYPES = ("api-result", "people-result")
SKIP_TRACE_API = "Skip Trace"
ZILLOW_SEARCH_API = "Zillow Search"

# entity type -> EntitySummary attribute; images are not summarized
_SUMMARY_FIELDS: dict[str, str] = {
    "address": "addresses",
    "person": "persons",
    "property": "properties",
    "phone": "phones",
    "email": "emails",
}
_ACTIONABLE_ADDRESSES = {"current", "previous"}
_ACTIONABLE_PERSONS = {"relative", "associate"}


def _now_ms() -> int:
    return int(time.time() * 1000)


def _default_session_id(created_at: int) -> str:
    return f"session-{created_at}-{uuid.uuid4().hex[:9]}"


def _default_session_name(created_at: int) -> str:
    created = datetime.fromtimestamp(created_at / 1000)
    return created.strftime("Session %m/%d/%Y %I:%M:%S %p")


def _load_schema(path: str | Path) -> dict[str, Any]:
    schema_path = Path(path)
    if not schema_path.is_absolute():
        schema_path = Path(__file__).resolve().parents[2] / schema_path
    with schema_path.open("r", encoding="utf-8") as handle:
        return cast(dict[str, Any], json.load(handle))


@dataclass
class NodeData:
    id: str
    type: str
    timestamp: int
    api_name: str = ""
    response: Any = None
    person_id: str | None = None
    person_data: Any = None
    address: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "apiName": self.api_name,
            "timestamp": self.timestamp,
        }
        optional = {
            "response": self.response,
            "personId": self.person_id,
            "personData": self.person_data,
            "address": self.address,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> NodeData:
        address = data.get("address")
        return NodeData(
            id=str(data["id"]),
            type=str(data["type"]),
            timestamp=int(data["timestamp"]),
            api_name=str(data.get("apiName") or ""),
            response=data.get("response"),
            person_id=data.get("personId"),
            person_data=data.get("personData"),
            address=dict(address) if isinstance(address, Mapping) else None,
        )


@dataclass
class SessionData:
    id: str
    name: str
    created_at: int
    last_accessed: int
    nodes: list[NodeData] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "lastAccessed": self.last_accessed,
            "nodes": [node.to_dict() for node in self.nodes],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> SessionData:
        created_at = int(data.get("createdAt") or 0)
        return SessionData(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            created_at=created_at,
            last_accessed=int(data.get("lastAccessed") or created_at),
            nodes=[NodeData.from_dict(node) for node in data.get("nodes") or []],
        )


@dataclass
class EntitySummary:
    total: int = 0
    addresses: int = 0
    persons: int = 0
    properties: int = 0
    phones: int = 0
    emails: int = 0

    def add(self, attribute: str, amount: int = 1) -> None:
        setattr(self, attribute, getattr(self, attribute) + amount)
        self.total += amount

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "addresses": self.addresses,
            "persons": self.persons,
            "properties": self.properties,
            "phones": self.phones,
            "emails": self.emails,
        }


@dataclass
class ActionableEntities:
    addresses: int = 0
    persons: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"addresses": self.addresses, "persons": self.persons}


def _sessions_in(entries: list[Any]) -> list[SessionData]:
    return [entry for entry in entries if isinstance(entry, SessionData)]


def _find(sessions: list[SessionData], session_id: str) -> SessionData | None:
    return next((s for s in sessions if s.id == session_id), None)


def node_entities(node: NodeData) -> list[Mapping[str, Any]]:
    """Entities carried by a ``people-result`` node, parsing raw payloads on demand."""

    if node.type != "people-result" or not node.person_data:
        return []
    if is_parsed_payload(node.person_data):
        return entities_from_parsed(node.person_data)
    parsed = parse_person_detail_response(node.person_data)
    return [entity.as_dict() for entity in parsed.entities]


class SessionStore:
    """Investigative sessions persisted to a key/value backend.

    The store holds no state of its own between calls; every operation reads
    the persisted session list, so several store objects over the same backend
    stay consistent. Storage and data problems are logged and degrade to an
    empty list or a no-op instead of raising.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[int], str] | None = None,
        schema_path: str | Path = SESSION_SCHEMA_PATH,
    ) -> None:
        self.storage = storage
        self._clock = clock or _now_ms
        self._id_factory = id_factory or _default_session_id
        self._validator = Draft202012Validator(_load_schema(schema_path))

    # -- persistence -------------------------------------------------------

    def _load_entries(self) -> list[Any]:
        """Stored entries in order; those failing validation stay as raw JSON.

        Raw entries are written back untouched by every save, so only
        ``clear_corrupted_data`` removes them.
        """

        try:
            raw = self.storage.get_item(SESSIONS_KEY)
        except (OSError, ValueError) as exc:
            logger.error("Error loading sessions: %s", exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.error("Error loading sessions, stored JSON is corrupted: %s", exc)
            return []
        if not isinstance(data, list):
            logger.error(
                "Error loading sessions, expected a list but found %s", type(data).__name__
            )
            return []
        entries: list[Any] = []
        for index, entry in enumerate(data):
            session = self._session_from_entry(entry, index)
            entries.append(entry if session is None else session)
        return entries

    def get_sessions(self) -> list[SessionData]:
        return _sessions_in(self._load_entries())

    def _session_from_entry(self, entry: Any, index: int) -> SessionData | None:
        if isinstance(entry, dict) and not isinstance(entry.get("nodes"), list):
            entry = {**entry, "nodes": []}
        errors = sorted(self._validator.iter_errors(entry), key=lambda e: list(e.path))
        if errors:
            path = ".".join(str(p) for p in errors[0].path) or "$"
            logger.warning(
                "Skipping stored session #%d: %s at %s", index, errors[0].message, path
            )
            return None
        return SessionData.from_dict(entry)

    def _save_sessions(self, entries: list[Any]) -> None:
        payload = [
            entry.to_dict() if isinstance(entry, SessionData) else entry for entry in entries
        ]
        try:
            self.storage.set_item(SESSIONS_KEY, json.dumps(payload))
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving sessions: %s", exc)

    def get_current_session_id(self) -> str | None:
        try:
            return self.storage.get_item(CURRENT_SESSION_KEY) or None
        except (OSError, ValueError) as exc:
            logger.error("Error reading current session id: %s", exc)
            return None

    def _store_current_session_id(self, session_id: str) -> None:
        try:
            self.storage.set_item(CURRENT_SESSION_KEY, session_id)
        except (OSError, ValueError) as exc:
            logger.error("Error saving current session id: %s", exc)

    def get_current_session(self) -> SessionData | None:
        session_id = self.get_current_session_id()
        if not session_id:
            return None
        return _find(self.get_sessions(), session_id)

    # -- lifecycle ---------------------------------------------------------

    def create_session(self, name: str | None = None) -> SessionData:
        created_at = self._clock()
        session = SessionData(
            id=self._id_factory(created_at),
            name=name or _default_session_name(created_at),
            created_at=created_at,
            last_accessed=created_at,
        )
        entries = self._load_entries()
        entries.append(session)
        self._save_sessions(entries)
        self._store_current_session_id(session.id)
        logger.info("Created session %s", session.id)
        return session

    def set_current_session(self, session_id: str) -> bool:
        entries = self._load_entries()
        session = _find(_sessions_in(entries), session_id)
        if session is None:
            logger.warning("Cannot select unknown session %s", session_id)
            return False
        self._store_current_session_id(session_id)
        session.last_accessed = self._clock()
        self._save_sessions(entries)
        return True

    def add_node(self, node: NodeData) -> None:
        session_id = self.get_current_session_id()
        if not session_id:
            logger.debug("No current session, dropping node %s", node.id)
            return
        entries = self._load_entries()
        session = _find(_sessions_in(entries), session_id)
        if session is None:
            logger.debug(
                "Current session %s no longer exists, dropping node %s", session_id, node.id
            )
            return
        session.nodes.append(node)
        session.last_accessed = self._clock()
        self._save_sessions(entries)

    def get_nodes(self) -> list[NodeData]:
        session = self.get_current_session()
        if session is None:
            return []
        return session.nodes

    def load_session(self, session_id: str) -> list[NodeData]:
        if not self.set_current_session(session_id):
            return []
        return self.get_nodes()

    def rename_session(self, session_id: str, new_name: str) -> bool:
        entries = self._load_entries()
        session = _find(_sessions_in(entries), session_id)
        if session is None:
            return False
        session.name = new_name
        session.last_accessed = self._clock()
        self._save_sessions(entries)
        return True

    def delete_session(self, session_id: str) -> None:
        entries = self._load_entries()
        remaining = [
            entry
            for entry in entries
            if not (isinstance(entry, SessionData) and entry.id == session_id)
        ]
        if len(remaining) != len(entries):
            self._save_sessions(remaining)
        if self.get_current_session_id() == session_id:
            replacement = self.create_session()
            logger.info("Deleted current session %s, switched to %s", session_id, replacement.id)

    def clear_corrupted_data(self) -> None:
        try:
            self.storage.remove_item(SESSIONS_KEY)
            self.storage.remove_item(CURRENT_SESSION_KEY)
        except (OSError, ValueError) as exc:
            logger.error("Error clearing corrupted data: %s", exc)
            return
        logger.info("Cleared corrupted session data")

    # -- derived views -----------------------------------------------------

    def get_entity_summary(self) -> EntitySummary:
        summary = EntitySummary()
        for node in self.get_nodes():
            if node.type == "api-result" and node.response:
                if node.api_name == SKIP_TRACE_API:
                    people = fields.section(node.response, "people")
                    if people:
                        summary.add("persons", len(people))
                elif node.api_name == ZILLOW_SEARCH_API:
                    summary.add("properties")
                continue
            for entity in node_entities(node):
                attribute = _SUMMARY_FIELDS.get(str(entity.get("type")))
                if attribute is not None:
                    summary.add(attribute)
        return summary

    def get_actionable_entities(self) -> ActionableEntities:
        actionable = ActionableEntities()
        for node in self.get_nodes():
            for entity in node_entities(node):
                entity_type = entity.get("type")
                category = entity.get("category")
                if entity_type == "address" and category in _ACTIONABLE_ADDRESSES:
                    actionable.addresses += 1
                elif entity_type == "person" and category in _ACTIONABLE_PERSONS:
                    actionable.persons += 1
        return actionable
