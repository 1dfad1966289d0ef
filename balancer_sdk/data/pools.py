"""Pool snapshots from the subgraph.

The subgraph reports balances, weights, rates and fees as decimal strings
in whole units; parsing converts them to the raw and 18-decimal integers
the calculators use.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

import structlog
from pydantic import ValidationError

from balancer_sdk.data.subgraph import POOL_QUERY, POOLS_QUERY, SubgraphClient
from balancer_sdk.errors import InvalidPoolStateError
from balancer_sdk.math.fixed_point import Bfp
from balancer_sdk.models.pool import PoolSnapshot, PoolToken
from balancer_sdk.models.subgraph import SubgraphPool
from balancer_sdk.models.types import normalize_address

logger = structlog.get_logger()

DEFAULT_POOLS_PAGE_SIZE = 1000


def _to_raw(value: str, decimals: int) -> int:
    """Whole-unit decimal string to an integer with `decimals` decimals, truncating."""
    try:
        scaled = Decimal(value).scaleb(decimals)
    except InvalidOperation as err:
        raise InvalidPoolStateError(f"Not a decimal number: '{value}'") from err
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def _to_fixed(value: str) -> int:
    try:
        return Bfp.from_decimal(value).value
    except (InvalidOperation, ValueError) as err:
        raise InvalidPoolStateError(f"Not a non-negative decimal: '{value}'") from err


def parse_subgraph_pool(pool: SubgraphPool) -> PoolSnapshot:
    """Convert a subgraph pool into a PoolSnapshot.

    Raises:
        InvalidPoolStateError: If a numeric field cannot be parsed
    """
    tokens = tuple(
        PoolToken(
            address=normalize_address(token.address),
            balance=_to_raw(token.balance, token.decimals),
            decimals=token.decimals,
            weight=_to_fixed(token.weight) if token.weight is not None else None,
            price_rate=_to_fixed(token.price_rate),
            symbol=token.symbol,
        )
        for token in pool.tokens
    )
    return PoolSnapshot(
        id=pool.id.lower(),
        address=normalize_address(pool.address),
        pool_type=pool.pool_type,
        tokens=tokens,
        swap_fee=_to_fixed(pool.swap_fee),
        total_shares=_to_fixed(pool.total_shares),
        amplification_parameter=Decimal(pool.amp) if pool.amp is not None else None,
        pool_type_version=pool.pool_type_version,
        main_index=pool.main_index,
        wrapped_index=pool.wrapped_index,
        lower_target=_to_fixed(pool.lower_target) if pool.lower_target is not None else None,
        upper_target=_to_fixed(pool.upper_target) if pool.upper_target is not None else None,
        symbol=pool.symbol,
    )


def _parse_or_skip(raw: dict[str, Any]) -> PoolSnapshot | None:
    try:
        return parse_subgraph_pool(SubgraphPool.model_validate(raw))
    except (ValidationError, InvalidPoolStateError) as err:
        logger.warning("subgraph_pool_skipped", pool_id=raw.get("id"), error=str(err))
        return None


class PoolsRepository:
    """Fetches pools from the subgraph as PoolSnapshots.

    Snapshots are never cached; every call hits the subgraph.
    """

    def __init__(self, client: SubgraphClient) -> None:
        self.client = client

    async def find(self, pool_id: str) -> PoolSnapshot | None:
        """One pool by id. Malformed pools raise instead of being skipped."""
        data = await self.client.query(POOL_QUERY, {"id": pool_id.lower()})
        raw = data.get("pool")
        if not raw:
            return None
        return parse_subgraph_pool(SubgraphPool.model_validate(raw))

    async def all(
        self,
        pool_types: Sequence[str] | None = None,
        first: int = DEFAULT_POOLS_PAGE_SIZE,
        skip: int = 0,
    ) -> list[PoolSnapshot]:
        """A page of pools, largest liquidity first. Unparseable pools are skipped."""
        where: dict[str, Any] = {"totalShares_gt": "0"}
        if pool_types:
            where["poolType_in"] = list(pool_types)
        data = await self.client.query(POOLS_QUERY, {"where": where, "first": first, "skip": skip})

        pools = []
        for raw in data.get("pools", []):
            snapshot = _parse_or_skip(raw)
            if snapshot is not None:
                pools.append(snapshot)
        logger.debug("subgraph_pools_loaded", count=len(pools), skip=skip, first=first)
        return pools
