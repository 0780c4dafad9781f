"""
REST datastore client.

Talks to a hosted Postgres exposed through a PostgREST interface (the
Supabase `/rest/v1` API) using httpx.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from feedbackhub.storage.base import Datastore, Row
from feedbackhub.utils.error_handling import AsyncErrorContext, PersistenceError


logger = logging.getLogger(__name__)


class RestDatastore(Datastore):
    """
    Datastore backed by a PostgREST endpoint.
    """

    def __init__(self, base_url: str, api_key: str,
                 timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the REST datastore.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (used in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers=self._get_headers(),
            timeout=timeout
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get standard PostgREST headers."""
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def _build_params(self,
                      filters: Optional[Dict[str, Any]],
                      order: Optional[str],
                      limit: Optional[int]) -> Dict[str, str]:
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            if value is None:
                params[column] = "is.null"
            else:
                params[column] = f"eq.{self._format_value(value)}"
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)
        return params

    @staticmethod
    def _raise_for_status(response: httpx.Response, message: str) -> None:
        if response.is_success:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        raise PersistenceError(
            message,
            details={
                "reason": body.get("message") or response.text or f"HTTP {response.status_code}",
                "status": response.status_code,
                "hint": body.get("hint")
            },
            code=body.get("code") or str(response.status_code)
        )

    @staticmethod
    def _parse_rows(response: httpx.Response, message: str) -> List[Row]:
        try:
            rows = response.json()
        except ValueError as e:
            raise PersistenceError(
                message,
                details={"reason": f"Response body is not JSON: {response.text[:200]}", "status": response.status_code},
                code="BAD_RESPONSE"
            ) from e

        if not isinstance(rows, list):
            raise PersistenceError(
                message,
                details={"reason": f"Expected a list of rows, got {type(rows).__name__}", "status": response.status_code},
                code="BAD_RESPONSE"
            )
        return rows

    async def select(self,
                     table: str,
                     filters: Optional[Dict[str, Any]] = None,
                     order: Optional[str] = None,
                     limit: Optional[int] = None) -> List[Row]:
        params = self._build_params(filters, order, limit)
        message = f"Failed to read from {table}"

        async with AsyncErrorContext("datastore", message, PersistenceError, code="NETWORK"):
            response = await self.client.get(f"/{table}", params=params)

        self._raise_for_status(response, message)
        rows = self._parse_rows(response, message)
        logger.debug(f"Selected {len(rows)} rows from {table}")
        return rows

    async def insert(self, table: str, row: Row) -> Row:
        message = f"Failed to insert into {table}"

        async with AsyncErrorContext("datastore", message, PersistenceError, code="NETWORK"):
            response = await self.client.post(
                f"/{table}",
                json=[row],
                headers={"Prefer": "return=representation"}
            )

        self._raise_for_status(response, message)

        rows = self._parse_rows(response, message)
        if not rows:
            raise PersistenceError(message, details={"reason": "Insert returned no rows"}, code="EMPTY")

        logger.info(f"Inserted row {rows[0].get('id')} into {table}")
        return rows[0]

    async def close(self) -> None:
        await self.client.aclose()
