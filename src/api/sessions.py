from __future__ import annotations

import time
import uuid
from functools import lru_cache
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field

from ..env_loader import env_path
from ..skiptrace.sessions import NodeData, SessionData, SessionStore
from ..skiptrace.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

router = APIRouter(prefix="/sessions", tags=["sessions"])


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Build the process-wide store; tests swap it through ``dependency_overrides``."""

    session_file = env_path("SKIPTRACE_SESSION_FILE")
    storage: KeyValueStorage = (
        JsonFileStorage(session_file) if session_file is not None else MemoryStorage()
    )
    return SessionStore(storage)


class SessionCreate(BaseModel):
    name: str | None = None


class SessionRename(BaseModel):
    name: str = Field(min_length=1)


class SessionSelect(BaseModel):
    session_id: str


class NodeCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["api-result", "people-result"]
    api_name: str = Field(default="", alias="apiName")
    response: Any = None
    person_id: str | None = Field(default=None, alias="personId")
    person_data: Any = Field(default=None, alias="personData")
    address: dict[str, str] | None = None


def new_node_id() -> str:
    return f"node-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _session_overview(session: SessionData) -> dict[str, Any]:
    return {
        "id": session.id,
        "name": session.name,
        "createdAt": session.created_at,
        "lastAccessed": session.last_accessed,
        "node_count": len(session.nodes),
    }


def _require_current(store: SessionStore) -> SessionData:
    session = store.get_current_session()
    if session is None:
        raise HTTPException(status_code=409, detail="No current session")
    return session


@router.get("")
async def list_sessions(store: SessionStore = Depends(get_session_store)):  # noqa: B008
    return {
        "current_session_id": store.get_current_session_id(),
        "sessions": [_session_overview(session) for session in store.get_sessions()],
    }


@router.post("", status_code=201)
async def create_session(
    body: SessionCreate | None = None,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    session = store.create_session(body.name if body else None)
    return session.to_dict()


@router.get("/current")
async def current_session(store: SessionStore = Depends(get_session_store)):  # noqa: B008
    return _require_current(store).to_dict()


@router.put("/current")
async def select_session(
    body: SessionSelect,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    if all(session.id != body.session_id for session in store.get_sessions()):
        raise HTTPException(status_code=404, detail="Session not found")
    nodes = store.load_session(body.session_id)
    return {"current_session_id": body.session_id, "nodes": [node.to_dict() for node in nodes]}


@router.get("/current/nodes")
async def list_nodes(store: SessionStore = Depends(get_session_store)):  # noqa: B008
    return [node.to_dict() for node in store.get_nodes()]


@router.post("/current/nodes", status_code=201)
async def append_node(
    body: NodeCreate,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    _require_current(store)
    node = NodeData(
        id=new_node_id(),
        type=body.type,
        timestamp=int(time.time() * 1000),
        api_name=body.api_name,
        response=body.response,
        person_id=body.person_id,
        person_data=body.person_data,
        address=body.address,
    )
    store.add_node(node)
    return node.to_dict()


@router.get("/current/summary")
async def session_summary(store: SessionStore = Depends(get_session_store)):  # noqa: B008
    session = _require_current(store)
    return {
        "session_id": session.id,
        "entities": store.get_entity_summary().as_dict(),
        "actionable": store.get_actionable_entities().as_dict(),
    }


@router.patch("/{session_id}")
async def rename_session(
    session_id: str,
    body: SessionRename,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    if not store.rename_session(session_id, body.name):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"id": session_id, "name": body.name}


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    store.delete_session(session_id)
    return {"current_session_id": store.get_current_session_id()}


@router.post("/clear", status_code=204)
async def clear_sessions(
    store: SessionStore = Depends(get_session_store),  # noqa: B008
) -> Response:
    store.clear_corrupted_data()
    return Response(status_code=204)
