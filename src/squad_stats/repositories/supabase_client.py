"""Hosted table store client.

Talks to the Supabase REST (PostgREST) endpoint of a project with the
project's anon key. Row level security on the hosted side decides what the
key may read and write.
"""

import logging
from typing import Any, Optional

import httpx

from squad_stats.repositories.base import StoreError, TableStore

logger = logging.getLogger(__name__)


class SupabaseClient(TableStore):
    """Async PostgREST client for the players and player_history tables."""

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            url: Project URL, e.g. https://xyzcompany.supabase.co
            api_key: Project anon key
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not url or not api_key:
            raise ValueError("Missing Supabase environment variables")
        self.base_url = url.rstrip("/") + self.REST_PATH
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @staticmethod
    def _filter_params(filters: Optional[dict[str, Any]]) -> dict[str, str]:
        return {column: f"eq.{value}" for column, value in (filters or {}).items()}

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> list[dict]:
        headers = {"Prefer": prefer} if prefer else None
        try:
            client = await self._get_client()
            response = await client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(f"{method} {table} failed ({e.response.status_code}): {message}")
            raise StoreError(message, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {table} failed: {e}")
            raise StoreError(str(e) or e.__class__.__name__) from e

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{method} {table} returned a non-JSON body ({response.status_code})")
            raise StoreError(
                f"Unexpected non-JSON response from {table}",
                status_code=response.status_code,
            ) from e
        return data if isinstance(data, list) else [data]

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        params = {"select": "*", **self._filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return await self._request("GET", table, params=params)

    async def insert(self, table: str, rows: list[dict]) -> list[dict]:
        if not rows:
            return []
        return await self._request(
            "POST", table, json=rows, prefer="return=representation"
        )

    async def update(self, table: str, values: dict, filters: dict[str, Any]) -> list[dict]:
        return await self._request(
            "PATCH",
            table,
            params=self._filter_params(filters),
            json=values,
            prefer="return=representation",
        )

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        await self._request("DELETE", table, params=self._filter_params(filters))

    async def upsert(self, table: str, rows: list[dict], on_conflict: str) -> list[dict]:
        if not rows:
            return []
        return await self._request(
            "POST",
            table,
            params={"on_conflict": on_conflict},
            json=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )


def _error_message(response: httpx.Response) -> str:
    """Pull the PostgREST error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return response.text or f"HTTP {response.status_code}"
