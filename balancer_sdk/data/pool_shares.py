"""Pool share lookups: which users hold how much BPT of which pool."""

from __future__ import annotations

from enum import Enum
from typing import Any

from balancer_sdk.data.subgraph import POOL_SHARE_QUERY, POOL_SHARES_QUERY, SubgraphClient
from balancer_sdk.models.subgraph import PoolShare

DEFAULT_USER_PAGE_SIZE = 200
DEFAULT_POOL_PAGE_SIZE = 1000


class PoolShareAttribute(str, Enum):
    ID = "id"
    USER_ADDRESS = "userAddress"
    POOL_ID = "poolId"


def _map_pool_share(raw: dict[str, Any]) -> PoolShare:
    return PoolShare(
        id=raw["id"],
        user_address=raw["userAddress"]["id"],
        pool_id=raw["poolId"]["id"],
        balance=raw["balance"],
    )


class PoolSharesRepository:
    """Read-only access to subgraph PoolShare entities, largest balance first."""

    def __init__(self, client: SubgraphClient) -> None:
        self.client = client

    async def find(self, id: str) -> PoolShare | None:
        data = await self.client.query(POOL_SHARE_QUERY, {"id": id})
        raw = data.get("poolShare")
        return _map_pool_share(raw) if raw else None

    async def find_by(self, attribute: PoolShareAttribute | str, value: str) -> PoolShare | None:
        """Single lookup; only the id attribute identifies one share."""
        name = attribute.value if isinstance(attribute, PoolShareAttribute) else attribute
        if name != PoolShareAttribute.ID.value:
            return None
        return await self.find(value)

    async def find_all_by(
        self,
        attribute: PoolShareAttribute | str,
        value: str,
        first: int,
        skip: int,
    ) -> list[PoolShare]:
        data = await self.client.query(
            POOL_SHARES_QUERY,
            {
                "where": {PoolShareAttribute(attribute).value: value},
                "first": first,
                "skip": skip,
                "orderBy": "balance",
                "orderDirection": "desc",
            },
        )
        return [_map_pool_share(raw) for raw in data.get("poolShares", [])]

    async def find_by_user(
        self, user_address: str, first: int = DEFAULT_USER_PAGE_SIZE, skip: int = 0
    ) -> list[PoolShare]:
        return await self.find_all_by(PoolShareAttribute.USER_ADDRESS, user_address, first, skip)

    async def find_by_pool(
        self, pool_id: str, first: int = DEFAULT_POOL_PAGE_SIZE, skip: int = 0
    ) -> list[PoolShare]:
        return await self.find_all_by(PoolShareAttribute.POOL_ID, pool_id, first, skip)
