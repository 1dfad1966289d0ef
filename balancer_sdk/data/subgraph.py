"""Async GraphQL client for the Balancer V2 subgraph."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from balancer_sdk.errors import SubgraphError

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 30.0

POOL_SHARE_FIELDS = """
    id
    userAddress { id }
    poolId { id }
    balance
"""

POOL_SHARE_QUERY = f"""
query PoolShare($id: ID!) {{
  poolShare(id: $id) {{ {POOL_SHARE_FIELDS} }}
}}
"""

POOL_SHARES_QUERY = f"""
query PoolShares(
  $where: PoolShare_filter
  $first: Int
  $skip: Int
  $orderBy: PoolShare_orderBy
  $orderDirection: OrderDirection
) {{
  poolShares(
    where: $where
    first: $first
    skip: $skip
    orderBy: $orderBy
    orderDirection: $orderDirection
  ) {{ {POOL_SHARE_FIELDS} }}
}}
"""

POOL_FIELDS = """
    id
    address
    poolType
    poolTypeVersion
    swapFee
    totalShares
    amp
    mainIndex
    wrappedIndex
    lowerTarget
    upperTarget
    symbol
    tokens(orderBy: index) { address balance decimals weight priceRate symbol }
"""

POOL_QUERY = f"""
query Pool($id: ID!) {{
  pool(id: $id) {{ {POOL_FIELDS} }}
}}
"""

POOLS_QUERY = f"""
query Pools($where: Pool_filter, $first: Int, $skip: Int) {{
  pools(
    where: $where
    first: $first
    skip: $skip
    orderBy: totalLiquidity
    orderDirection: desc
  ) {{ {POOL_FIELDS} }}
}}
"""


class SubgraphClient:
    """Posts GraphQL queries to a subgraph endpoint.

    Pass an existing httpx.AsyncClient to share a connection pool (or to
    inject a mock transport); otherwise the client owns one.
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a query and return its `data` object.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            SubgraphError: If the response carries GraphQL errors or no data
        """
        response = await self._client.post(
            self.url, json={"query": query, "variables": variables or {}}
        )
        response.raise_for_status()
        payload = response.json()

        errors = payload.get("errors")
        if errors:
            logger.warning("subgraph_query_failed", url=self.url, errors=errors)
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise SubgraphError(f"Subgraph returned errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise SubgraphError("Subgraph response has no data")
        return data

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> SubgraphClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
