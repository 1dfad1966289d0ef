"""Proportional join/exit math shared by every Vault pool family.

Amounts in round up and amounts out round down, so the pool never loses
value to rounding.
"""

from __future__ import annotations

from collections.abc import Sequence

from balancer_sdk.errors import InvalidPoolStateError
from balancer_sdk.math.fixed_point import Bfp


def compute_proportional_amounts_in(
    balances: Sequence[Bfp], bpt_total_supply: Bfp, bpt_amount_out: Bfp
) -> list[Bfp]:
    """Token amounts needed to mint bpt_amount_out without changing ratios."""
    if bpt_total_supply.value == 0:
        raise InvalidPoolStateError("Cannot join proportionally: BPT supply is zero")
    bpt_ratio = bpt_amount_out.div_up(bpt_total_supply)
    return [balance.mul_up(bpt_ratio) for balance in balances]


def compute_proportional_amounts_out(
    balances: Sequence[Bfp], bpt_total_supply: Bfp, bpt_amount_in: Bfp
) -> list[Bfp]:
    """Token amounts released by burning bpt_amount_in without changing ratios."""
    if bpt_total_supply.value == 0:
        raise InvalidPoolStateError("Cannot exit proportionally: BPT supply is zero")
    bpt_ratio = bpt_amount_in.div_down(bpt_total_supply)
    return [balance.mul_down(bpt_ratio) for balance in balances]
