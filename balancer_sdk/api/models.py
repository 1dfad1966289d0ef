"""Request and response models of the quoting API.

Integers that can exceed 2^53 travel as decimal strings (Uint256).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from balancer_sdk.math.fixed_point import ONE_18
from balancer_sdk.models.pool import PoolSnapshot, PoolToken
from balancer_sdk.models.transaction import (
    ExitPoolAttributes,
    JoinPoolAttributes,
    TransactionRequest,
)
from balancer_sdk.models.types import Address, PoolId, Uint256


class PoolTokenModel(BaseModel):
    address: Address
    balance: Uint256 = Field(description="Raw balance in the token's decimals")
    decimals: int = Field(default=18, ge=0, le=18)
    weight: Uint256 | None = None
    price_rate: Uint256 = str(ONE_18)
    symbol: str | None = None


class PoolModel(BaseModel):
    """A pool snapshot as JSON. Fixed-point fields use 18 decimals."""

    id: PoolId
    address: Address
    pool_type: str
    tokens: list[PoolTokenModel] = Field(min_length=1)
    swap_fee: Uint256
    total_shares: Uint256
    amplification_parameter: Decimal | None = None
    pool_type_version: int = 1
    main_index: int | None = None
    wrapped_index: int | None = None
    lower_target: Uint256 | None = None
    upper_target: Uint256 | None = None

    def to_snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            id=self.id.lower(),
            address=self.address.lower(),
            pool_type=self.pool_type,
            tokens=tuple(
                PoolToken(
                    address=t.address.lower(),
                    balance=int(t.balance),
                    decimals=t.decimals,
                    weight=int(t.weight) if t.weight is not None else None,
                    price_rate=int(t.price_rate),
                    symbol=t.symbol,
                )
                for t in self.tokens
            ),
            swap_fee=int(self.swap_fee),
            total_shares=int(self.total_shares),
            amplification_parameter=self.amplification_parameter,
            pool_type_version=self.pool_type_version,
            main_index=self.main_index,
            wrapped_index=self.wrapped_index,
            lower_target=int(self.lower_target) if self.lower_target is not None else None,
            upper_target=int(self.upper_target) if self.upper_target is not None else None,
        )


class LiquidityRequest(BaseModel):
    pool: PoolModel
    token_prices: dict[str, Decimal]


class LiquidityResponse(BaseModel):
    liquidity: str


class SpotPriceRequest(BaseModel):
    pool: PoolModel
    token_in: Address
    token_out: Address


class SpotPriceResponse(BaseModel):
    spot_price: str


class JoinRequest(BaseModel):
    pool: PoolModel
    joiner: Address
    tokens_in: list[Address]
    amounts_in: list[Uint256]
    slippage: Uint256 = Field(description="18-decimal fraction, 10^16 = 1%")


class ExitExactBptInRequest(BaseModel):
    pool: PoolModel
    exiter: Address
    bpt_in: Uint256
    slippage: Uint256
    single_token_out: Address | None = None


class ExitExactTokensOutRequest(BaseModel):
    pool: PoolModel
    exiter: Address
    tokens_out: list[Address]
    amounts_out: list[Uint256]
    slippage: Uint256


class ComposableStableCreateRequest(BaseModel):
    factory_address: Address
    name: str
    symbol: str
    token_addresses: list[Address]
    amplification_parameter: int
    rate_providers: list[Address]
    token_rate_cache_durations: list[int]
    exempt_from_yield_protocol_fee_flags: list[bool]
    swap_fee: str = Field(description='Fee fraction, e.g. "0.01" for 1%')
    owner: Address


class TransactionModel(BaseModel):
    to: str
    data: str
    function_name: str
    value: str
    attributes: dict[str, Any]

    @classmethod
    def from_request(cls, request: TransactionRequest) -> TransactionModel:
        return cls(
            to=request.to,
            data=request.data,
            function_name=request.function_name,
            value=str(request.value),
            attributes=_stringify(request.attributes),
        )


def _stringify(value: Any) -> Any:
    """Render ints as strings so uint256 values survive JSON clients."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_stringify(v) for v in value]
    return value


class JoinResponse(BaseModel):
    transaction: TransactionModel
    expected_bpt_out: str
    min_bpt_out: str
    max_amounts_in: list[str]

    @classmethod
    def from_attributes(cls, attrs: JoinPoolAttributes) -> JoinResponse:
        return cls(
            transaction=TransactionModel.from_request(attrs.transaction),
            expected_bpt_out=str(attrs.expected_bpt_out),
            min_bpt_out=str(attrs.min_bpt_out),
            max_amounts_in=[str(a) for a in attrs.max_amounts_in],
        )


class ExitResponse(BaseModel):
    transaction: TransactionModel
    expected_amounts_out: list[str]
    min_amounts_out: list[str]
    expected_bpt_in: str
    max_bpt_in: str

    @classmethod
    def from_attributes(cls, attrs: ExitPoolAttributes) -> ExitResponse:
        return cls(
            transaction=TransactionModel.from_request(attrs.transaction),
            expected_amounts_out=[str(a) for a in attrs.expected_amounts_out],
            min_amounts_out=[str(a) for a in attrs.min_amounts_out],
            expected_bpt_in=str(attrs.expected_bpt_in),
            max_bpt_in=str(attrs.max_bpt_in),
        )
