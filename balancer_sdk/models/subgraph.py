"""Pydantic models for Balancer subgraph payloads.

Field aliases follow the subgraph's camelCase names. Numeric fields stay
decimal strings here; conversion to fixed point happens when a pool is
turned into a PoolSnapshot.
"""

from pydantic import BaseModel, Field

from balancer_sdk.models.types import Address


class SubgraphPoolToken(BaseModel):
    """One entry of a pool's `tokens` list."""

    model_config = {"populate_by_name": True}

    address: Address
    balance: str = Field(description="Balance in whole tokens, as a decimal string")
    decimals: int = Field(default=18, ge=0, le=18)
    weight: str | None = None
    price_rate: str = Field(default="1", alias="priceRate")
    symbol: str | None = None


class SubgraphPool(BaseModel):
    """The pool fields the calculators need."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    id: str = Field(pattern=r"^0x[a-fA-F0-9]{64}$")
    address: Address
    pool_type: str = Field(alias="poolType")
    pool_type_version: int = Field(default=1, alias="poolTypeVersion")
    swap_fee: str = Field(alias="swapFee")
    total_shares: str = Field(alias="totalShares")
    amp: str | None = None
    tokens: list[SubgraphPoolToken]
    main_index: int | None = Field(default=None, alias="mainIndex")
    wrapped_index: int | None = Field(default=None, alias="wrappedIndex")
    lower_target: str | None = Field(default=None, alias="lowerTarget")
    upper_target: str | None = Field(default=None, alias="upperTarget")
    symbol: str | None = None


class PoolShare(BaseModel):
    """A user's BPT balance in one pool."""

    model_config = {"populate_by_name": True, "frozen": True}

    id: str
    user_address: str = Field(alias="userAddress")
    pool_id: str = Field(alias="poolId")
    balance: str
