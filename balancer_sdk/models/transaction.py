"""Outbound transaction requests.

The library never signs or submits; it only describes calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TransactionRequest:
    """A contract call ready to be signed by the caller.

    Attributes:
        to: Target contract address
        data: ABI-encoded calldata (0x-prefixed hex)
        function_name: Name of the encoded function
        attributes: The structured parameters that were encoded
        value: Native ETH to send with the call (wei)
    """

    to: str
    data: str
    function_name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    value: int = 0


@dataclass(frozen=True)
class JoinPoolAttributes:
    """A join transaction plus the quote it was built from.

    `min_bpt_out` is set for exact-tokens-in joins. `max_amounts_in` is the
    per-token limit passed to the Vault, in pool order.
    """

    transaction: TransactionRequest
    pool_id: str
    tokens_in: list[str]
    amounts_in: list[int]
    max_amounts_in: list[int]
    expected_bpt_out: int
    min_bpt_out: int


@dataclass(frozen=True)
class ExitPoolAttributes:
    """An exit transaction plus the quote it was built from.

    For exact-BPT-in exits `expected_amounts_out` / `min_amounts_out` vary and
    `max_bpt_in` equals `bpt_in`. For exact-tokens-out exits the amounts are
    fixed and `expected_bpt_in` / `max_bpt_in` carry the quote.
    """

    transaction: TransactionRequest
    pool_id: str
    tokens_out: list[str]
    expected_amounts_out: list[int]
    min_amounts_out: list[int]
    expected_bpt_in: int
    max_bpt_in: int
