# services/subgraph_client.py
"""
Async GraphQL client for subgraph endpoints
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import SubgraphQueryError


class SubgraphClient:
    """
    Thin GraphQL-over-HTTP client. One request is in flight at a time;
    retries are left to the transport.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.logger = logger or logging.getLogger(__name__)

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def query(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its `data` object.

        Raises:
            SubgraphQueryError: If the response carries GraphQL errors or no data
            httpx.HTTPError: On transport or non-2xx HTTP failures
        """
        payload = {"query": query, "variables": variables or {}}
        self.logger.debug(f"Subgraph query to {self.endpoint}: {variables}")

        response = await self._client.post(self.endpoint, json=payload)
        response.raise_for_status()
        body = response.json()

        if body.get("errors"):
            raise SubgraphQueryError(self.endpoint, body["errors"])
        if body.get("data") is None:
            raise SubgraphQueryError(self.endpoint, [{"message": "response has no data"}])

        return body["data"]
