"""Async client for the Apollo.io people search and organization enrichment APIs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

DEFAULT_BASE_URL = "https://api.apollo.io/api/v1"
API_SEARCH_PATH = "/mixed_people/api_search"
PEOPLE_SEARCH_PATH = "/mixed_people/search"
ORG_ENRICH_PATH = "/organizations/enrich"

QueryParams = Sequence[tuple[str, str]]


class ApolloError(RuntimeError):
    """Base error for Apollo client failures."""

    def __init__(self, message: str, code: str = "APOLLO_ERROR", status_code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class ApolloPermissionError(ApolloError):
    """Raised when the API key is not allowed to call an endpoint (HTTP 403)."""

    def __init__(self, message: str = "Apollo endpoint requires a different key tier") -> None:
        super().__init__(message, code="APOLLO_403", status_code=403)


class ApolloRateLimitError(ApolloError):
    """Raised when Apollo responds with HTTP 429."""

    def __init__(self, message: str = "Rate limited by Apollo") -> None:
        super().__init__(message, code="APOLLO_429", status_code=429)


class ApolloTimeoutError(ApolloError):
    """Raised when an Apollo request times out."""

    def __init__(self, message: str = "Apollo request timed out") -> None:
        super().__init__(message, code="APOLLO_TIMEOUT")


class ApolloSchemaError(ApolloError):
    """Raised when an Apollo response does not have the expected shape."""

    def __init__(self, message: str = "Unexpected Apollo response schema") -> None:
        super().__init__(message, code="APOLLO_SCHEMA_ERR")


class ApolloClient:
    """Minimal async Apollo API client."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 20.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("APOLLO_API_KEY is required to create an ApolloClient.")
        self._api_key = api_key
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def search_people(self, params: QueryParams, *, endpoint: str = API_SEARCH_PATH) -> list[dict[str, Any]]:
        """Run a people search against one of the two search endpoints."""
        response = await self._request("POST", endpoint, params=params)
        self._raise_for_status(response, action="people search")
        data = self._decode(response)
        people = data.get("people") or []
        if not isinstance(people, list) or not all(isinstance(entry, dict) for entry in people):
            raise ApolloSchemaError("`people` in Apollo response must be a list of objects.")
        return people

    async def enrich_organization(self, domain: str) -> dict[str, Any] | None:
        """Look up one organization by domain; ``None`` when Apollo does not know it."""
        response = await self._request("GET", ORG_ENRICH_PATH, params={"domain": domain})
        if response.status_code == 404:
            return None
        self._raise_for_status(response, action="organization enrich")
        organization = self._decode(response).get("organization")
        if organization is None:
            return None
        if not isinstance(organization, dict):
            raise ApolloSchemaError("`organization` in Apollo response must be an object.")
        return organization

    async def _request(self, method: str, path: str, *, params: Any) -> httpx.Response:
        headers = {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
        }
        try:
            return await self._http.request(method, path, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            raise ApolloTimeoutError() from exc
        except httpx.HTTPError as exc:
            raise ApolloError(f"HTTP error calling Apollo: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, action: str) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 403:
            raise ApolloPermissionError()
        if status == 429:
            raise ApolloRateLimitError()
        if status in (408, 504):
            raise ApolloTimeoutError()
        detail = response.text[:200]
        message = f"Apollo {action} failed: {status}"
        if detail:
            message = f"{message} - {detail}"
        raise ApolloError(message, status_code=status)

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ApolloSchemaError("Failed to decode Apollo response JSON.") from exc
        if not isinstance(data, dict):
            raise ApolloSchemaError("Apollo response must be a JSON object.")
        return data
