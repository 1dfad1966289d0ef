"""Pool snapshot dataclasses.

A snapshot is a point-in-time, immutable view of a pool. Every calculator
re-derives its result from the snapshot it is given; nothing is cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from balancer_sdk.errors import InvalidPoolStateError, TokenNotFoundError
from balancer_sdk.math.fixed_point import ONE_18, Bfp
from balancer_sdk.models.types import normalize_address


class PoolType(str, Enum):
    """Pool type tags as reported by the Balancer subgraph."""

    WEIGHTED = "Weighted"
    INVESTMENT = "Investment"
    LIQUIDITY_BOOTSTRAPPING = "LiquidityBootstrapping"
    MANAGED = "Managed"
    STABLE = "Stable"
    META_STABLE = "MetaStable"
    STABLE_PHANTOM = "StablePhantom"
    COMPOSABLE_STABLE = "ComposableStable"
    LINEAR = "Linear"
    AAVE_LINEAR = "AaveLinear"
    ERC4626_LINEAR = "ERC4626Linear"
    EULER_LINEAR = "EulerLinear"
    GEARBOX_LINEAR = "GearboxLinear"
    YEARN_LINEAR = "YearnLinear"
    ELEMENT = "Element"
    GYRO2 = "Gyro2"
    GYRO3 = "Gyro3"
    GYROE = "GyroE"
    FX = "FX"


@dataclass(frozen=True)
class PoolToken:
    """One token of a pool.

    Attributes:
        address: Token address (case-insensitive comparison supported)
        balance: Pool balance in the token's native decimals
        decimals: Token decimals
        weight: Normalized weight, 18-decimal fixed point (weighted pools only)
        price_rate: Rate provider value, 18-decimal fixed point
        symbol: Display symbol
    """

    address: str
    balance: int
    decimals: int = 18
    weight: int | None = None
    price_rate: int = ONE_18
    symbol: str | None = None

    @property
    def scaling_factor(self) -> int:
        """Balancer scaling factor: 10^(18 - decimals) as fixed point, times the rate.

        Matches `_computeScalingFactor(token).mulDown(rate)` on-chain.
        """
        if not 0 <= self.decimals <= 18:
            raise InvalidPoolStateError(
                f"Token {self.address} has unsupported decimals {self.decimals}"
            )
        decimals_factor = Bfp(10 ** (18 - self.decimals) * ONE_18)
        return decimals_factor.mul_down(Bfp(self.price_rate)).value

    def human_balance(self) -> Decimal:
        """Balance in whole tokens."""
        return Decimal(self.balance).scaleb(-self.decimals)


@dataclass(frozen=True)
class PoolSnapshot:
    """Balancer V2 pool state needed for quoting and encoding.

    Attributes:
        id: Pool id (bytes32 hex string)
        address: Pool contract (and BPT) address
        pool_type: Pool type tag, see PoolType
        tokens: Pool tokens in canonical (sorted) order. Composable stable and
            linear pools include their own BPT.
        swap_fee: Swap fee, 18-decimal fixed point
        total_shares: BPT in circulation, 18-decimal fixed point. For pools
            holding their own BPT this excludes the pre-minted supply.
        amplification_parameter: Unscaled A (stable family only)
        pool_type_version: Factory version of the pool
        main_index: Main token index (linear only)
        wrapped_index: Wrapped token index (linear only)
        lower_target: Lower target, upscaled main units (linear only)
        upper_target: Upper target, upscaled main units (linear only)
    """

    id: str
    address: str
    pool_type: str
    tokens: tuple[PoolToken, ...]
    swap_fee: int
    total_shares: int
    amplification_parameter: Decimal | None = None
    pool_type_version: int = 1
    main_index: int | None = None
    wrapped_index: int | None = None
    lower_target: int | None = None
    upper_target: int | None = None
    symbol: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if len(self.tokens) == 0:
            raise InvalidPoolStateError(f"Pool {self.id} has no tokens")
        addresses = [normalize_address(t.address) for t in self.tokens]
        if len(set(addresses)) != len(addresses):
            raise InvalidPoolStateError(f"Pool {self.id} lists a token twice")
        if addresses != sorted(addresses):
            raise InvalidPoolStateError(
                f"Pool {self.id} tokens are not in ascending address order"
            )
        if self.swap_fee < 0 or self.swap_fee >= ONE_18:
            raise InvalidPoolStateError(f"Pool {self.id} has invalid swap fee {self.swap_fee}")
        if self.total_shares < 0:
            raise InvalidPoolStateError(f"Pool {self.id} has negative total shares")

    @property
    def tokens_list(self) -> list[str]:
        """Lowercase token addresses in pool order."""
        return [normalize_address(t.address) for t in self.tokens]

    @property
    def bpt_index(self) -> int:
        """Index of the pool's own BPT within tokens, or -1."""
        pool_address = normalize_address(self.address)
        for i, token in enumerate(self.tokens):
            if normalize_address(token.address) == pool_address:
                return i
        return -1

    def token_index(self, token: str) -> int:
        """Index of a token in pool order.

        Raises:
            TokenNotFoundError: If the token is not in the pool
        """
        target = normalize_address(token)
        for i, pool_token in enumerate(self.tokens):
            if normalize_address(pool_token.address) == target:
                return i
        raise TokenNotFoundError(f"Token {token} not in pool {self.id}")

    def get_token(self, token: str) -> PoolToken:
        return self.tokens[self.token_index(token)]

    def without_bpt(self) -> tuple[PoolToken, ...]:
        """Tokens excluding the pool's own BPT."""
        bpt_index = self.bpt_index
        return tuple(t for i, t in enumerate(self.tokens) if i != bpt_index)
