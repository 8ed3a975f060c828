from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, cast

import requests

logger = logging.getLogger(__name__)

DEFAULT_HOST = "skip-tracing-working-api.p.rapidapi.com"
API_TYPES = ("name", "address", "phone", "email")
_SUBSCRIPTION_MARKERS = ("not subscribed", "403", "subscription", "unauthorized", "forbidden")


class SkipTraceAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubscriptionRequiredError(SkipTraceAPIError):
    """The provider rejected the call because the API key lacks a subscription."""


def is_subscription_error(error: BaseException) -> bool:
    if isinstance(error, SubscriptionRequiredError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _SUBSCRIPTION_MARKERS)


def _timeout() -> float:
    try:
        return float(os.getenv("SKIPTRACE_TIMEOUT_SECONDS", "15"))
    except ValueError:
        return 15.0


@dataclass
class SearchParams:
    name: str | None = None
    street: str | None = None
    citystatezip: str | None = None
    phone: str | None = None
    email: str | None = None


class SkipTraceClient:
    """Thin client for the RapidAPI skip-tracing endpoints.

    No retries happen here; failures surface as :class:`SkipTraceAPIError`.
    """

    def __init__(
        self,
        api_key: str,
        host: str = DEFAULT_HOST,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.host = host
        self.timeout = timeout if timeout is not None else _timeout()
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> SkipTraceClient:
        return cls(
            api_key=os.getenv("RAPIDAPI_KEY", ""),
            host=os.getenv("SKIPTRACE_API_HOST", DEFAULT_HOST),
        )

    def _get(self, label: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"https://{self.host}{path}"
        headers = {"x-rapidapi-host": self.host, "x-rapidapi-key": self.api_key}
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SkipTraceAPIError(f"{label} API request failed: {exc}") from exc
        if not response.ok:
            body = response.text or "Unknown error"
            message = f"{label} API error: {response.status_code} - {body}"
            if response.status_code == 403 or "not subscribed" in body.lower():
                raise SubscriptionRequiredError(message, response.status_code)
            raise SkipTraceAPIError(message, response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise SkipTraceAPIError(
                f"{label} API returned invalid JSON", response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise SkipTraceAPIError(
                f"{label} API returned {type(payload).__name__}, expected object"
            )
        return cast(dict[str, Any], payload)

    def search_by_name(self, name: str) -> dict[str, Any]:
        return self._get("Name Search", "/search/byname", {"name": name, "page": 1})

    def search_by_address(self, street: str, citystatezip: str) -> dict[str, Any]:
        return self._get(
            "Address Search",
            "/search/byaddress",
            {"street": street, "citystatezip": citystatezip, "page": 1},
        )

    def search_by_phone(self, phone: str) -> dict[str, Any]:
        return self._get("Phone Search", "/search/byphone", {"phoneno": phone, "page": 1})

    def search_by_email(self, email: str) -> dict[str, Any]:
        return self._get("Email Search", "/search/byemail", {"email": email, "phone": 1})

    def execute(self, api_type: str, params: SearchParams) -> dict[str, Any]:
        if api_type == "name":
            if not params.name:
                raise ValueError("Name parameter is required")
            return self.search_by_name(params.name)
        if api_type == "address":
            if not params.street or not params.citystatezip:
                raise ValueError("Address parameters are required")
            return self.search_by_address(params.street, params.citystatezip)
        if api_type == "phone":
            if not params.phone:
                raise ValueError("Phone parameter is required")
            return self.search_by_phone(params.phone)
        if api_type == "email":
            if not params.email:
                raise ValueError("Email parameter is required")
            return self.search_by_email(params.email)
        raise ValueError(f"Unknown API type: {api_type}")
