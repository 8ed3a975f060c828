from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from ..env_loader import env_path
from ..skiptrace import PARSER_VERSION
from ..skiptrace.client import (
    SearchParams,
    SkipTraceAPIError,
    SkipTraceClient,
    is_subscription_error,
)
from ..skiptrace.developer_data import extract_developer_data
from ..skiptrace.person_detail import parse_person_detail_response
from ..skiptrace.person_parser import parse_person_response
from ..skiptrace.sessions import SKIP_TRACE_API, NodeData, SessionStore
from .sessions import get_session_store, new_node_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skip-trace", tags=["skip-trace"])

DEFAULT_DEMO_SAMPLE = Path(__file__).resolve().parents[2] / "samples" / "person_detail_sample.json"


def get_skip_trace_client() -> SkipTraceClient:
    return SkipTraceClient.from_env()


class SearchRequest(BaseModel):
    api_type: Literal["name", "address", "phone", "email"]
    name: str | None = None
    street: str | None = None
    citystatezip: str | None = None
    phone: str | None = None
    email: str | None = None
    record: bool = False

    def params(self) -> SearchParams:
        return SearchParams(
            name=self.name,
            street=self.street,
            citystatezip=self.citystatezip,
            phone=self.phone,
            email=self.email,
        )

    def search_query(self) -> str:
        if self.api_type == "address":
            return ", ".join(part for part in (self.street, self.citystatezip) if part)
        return str(getattr(self, self.api_type) or "")


def _demo_candidates() -> list[Path]:
    candidates: list[Path] = []
    override = env_path("SKIPTRACE_DEMO_JSON")
    if override is not None:
        candidates.append(override)
    candidates.append(DEFAULT_DEMO_SAMPLE)
    return candidates


def _load_demo_sample() -> Any:
    for candidate in _demo_candidates():
        if candidate.exists():
            with candidate.open("r", encoding="utf-8") as handle:
                return json.load(handle)
    raise HTTPException(status_code=404, detail="Demo sample not available")


def _person_detail_payload(raw: Any) -> dict[str, Any]:
    parsed = parse_person_detail_response(raw)
    return {
        **parsed.as_dict(),
        "developer_data": extract_developer_data(raw),
        "parser_version": PARSER_VERSION,
    }


@router.post("/person-detail/parse")
async def parse_person_detail(raw: Any = Body(default=None)):  # noqa: B008
    return _person_detail_payload(raw)


@router.post("/person/parse")
async def parse_person(raw: Any = Body(default=None)):  # noqa: B008
    return {
        **parse_person_response(raw).as_dict(),
        "developer_data": extract_developer_data(raw),
        "parser_version": PARSER_VERSION,
    }


@router.get("/demo")
async def demo() -> dict[str, Any]:
    return _person_detail_payload(_load_demo_sample())


@router.post("/search")
def search(
    body: SearchRequest,
    client: SkipTraceClient = Depends(get_skip_trace_client),  # noqa: B008
    store: SessionStore = Depends(get_session_store),  # noqa: B008
):
    try:
        raw_response = client.execute(body.api_type, body.params())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SkipTraceAPIError as exc:
        if is_subscription_error(exc):
            raise HTTPException(status_code=402, detail="API subscription required") from exc
        logger.warning("Skip trace %s search failed: %s", body.api_type, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    recorded_node_id = None
    if body.record and store.get_current_session() is not None:
        node = NodeData(
            id=new_node_id(),
            type="api-result",
            timestamp=int(time.time() * 1000),
            api_name=SKIP_TRACE_API,
            response=raw_response,
        )
        store.add_node(node)
        recorded_node_id = node.id

    return {
        "api_type": body.api_type,
        "search_query": body.search_query(),
        "raw_response": raw_response,
        "developer_data": extract_developer_data(raw_response),
        "person": parse_person_response(raw_response).as_dict(),
        "recorded_node_id": recorded_node_id,
        "parser_version": PARSER_VERSION,
    }
