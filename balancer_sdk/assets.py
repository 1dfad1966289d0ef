"""Asset ordering for Vault calls.

The Vault requires pool tokens in ascending address order. Native ETH is
passed as the zero address but occupies the wrapped native asset's slot.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from balancer_sdk.config import DEFAULT_NETWORK_CONFIG
from balancer_sdk.constants import ZERO_ADDRESS
from balancer_sdk.errors import DuplicateTokenError, LengthMismatchError
from balancer_sdk.models.types import normalize_address


def is_eth(token: str) -> bool:
    """True if token is the zero address used for native ETH."""
    return normalize_address(token) == ZERO_ADDRESS


class AssetHelpers:
    """Sorts tokens (and parallel arrays) into Vault order."""

    def __init__(self, wrapped_native_asset: str) -> None:
        self.wrapped_native_asset = normalize_address(wrapped_native_asset)

    def translate_to_erc20(self, token: str) -> str:
        """Lowercase address, with native ETH replaced by the wrapped asset."""
        return self.wrapped_native_asset if is_eth(token) else normalize_address(token)

    def sort_tokens(
        self, tokens: Sequence[str], *others: Sequence[Any]
    ) -> tuple[list[str], ...]:
        """Sort tokens ascending and apply the same permutation to each parallel list.

        Returns:
            (sorted_tokens, *sorted_others). Tokens keep their original
            spelling; only the order changes.

        Raises:
            LengthMismatchError: If any parallel list differs in length from tokens
            DuplicateTokenError: If a token repeats, counting ETH as the wrapped asset
        """
        for i, other in enumerate(others):
            if len(other) != len(tokens):
                raise LengthMismatchError(
                    f"Array {i} has length {len(other)}, expected {len(tokens)}"
                )

        keys = [self.translate_to_erc20(token) for token in tokens]
        order = sorted(range(len(tokens)), key=lambda i: keys[i])
        for previous, current in zip(order, order[1:], strict=False):
            if keys[previous] == keys[current]:
                raise DuplicateTokenError(
                    f"Token {tokens[current]} appears twice (as {keys[current]})"
                )
        sorted_tokens = [tokens[i] for i in order]
        sorted_others = [[other[i] for i in order] for other in others]
        return (sorted_tokens, *sorted_others)


def sort_tokens(tokens: Sequence[str], *others: Sequence[Any]) -> tuple[list[str], ...]:
    """Sort with mainnet's wrapped native asset (WETH)."""
    helpers = AssetHelpers(DEFAULT_NETWORK_CONFIG.wrapped_native_asset)
    return helpers.sort_tokens(tokens, *others)
