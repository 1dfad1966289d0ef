"""Test helpers module for shared test utilities.

- constants: Token, pool and contract addresses
- factories: Pool snapshot builders and calldata decoders
"""

from tests.helpers.constants import (
    BAL,
    DAI,
    ETH,
    STATIC_AUSDC,
    TOKEN_DECIMALS,
    USDC,
    USDT,
    USER,
    WETH,
)
from tests.helpers.factories import (
    decode_call,
    decode_user_data,
    make_composable_pool,
    make_linear_pool,
    make_stable_pool,
    make_weighted_pool,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USDT",
    "BAL",
    "STATIC_AUSDC",
    "ETH",
    "USER",
    "TOKEN_DECIMALS",
    # Factories
    "make_weighted_pool",
    "make_stable_pool",
    "make_composable_pool",
    "make_linear_pool",
    "decode_call",
    "decode_user_data",
]
