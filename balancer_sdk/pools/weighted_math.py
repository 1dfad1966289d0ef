"""Balancer weighted pool math.

Join and exit formulas for weighted product pools (WeightedMath.sol). All
inputs are upscaled 18-decimal amounts; weights are normalized to sum to one.
"""

from collections.abc import Sequence
from typing import Literal

from balancer_sdk.constants import MAX_INVARIANT_RATIO, MIN_INVARIANT_RATIO
from balancer_sdk.errors import InvalidPoolStateError, InvariantRatioError
from balancer_sdk.math.fixed_point import ONE, ZERO, Bfp

PowVersion = Literal["v0", "v3Plus"]


def _pow_down(base: Bfp, exponent: Bfp, version: PowVersion) -> Bfp:
    return base.pow_down_v3(exponent) if version == "v3Plus" else base.pow_down(exponent)


def _pow_up(base: Bfp, exponent: Bfp, version: PowVersion) -> Bfp:
    return base.pow_up_v3(exponent) if version == "v3Plus" else base.pow_up(exponent)


def _check_balances(balances: Sequence[Bfp], weights: Sequence[Bfp]) -> None:
    for i, (balance, weight) in enumerate(zip(balances, weights, strict=True)):
        if balance.value <= 0:
            raise InvalidPoolStateError(f"Balance at index {i} must be positive")
        if weight.value <= 0:
            raise InvalidPoolStateError(f"Weight at index {i} must be positive")


def calc_bpt_out_given_exact_tokens_in(
    balances: Sequence[Bfp],
    normalized_weights: Sequence[Bfp],
    amounts_in: Sequence[Bfp],
    bpt_total_supply: Bfp,
    swap_fee: Bfp,
    *,
    version: PowVersion = "v0",
) -> Bfp:
    """BPT minted for an exact set of token amounts.

    The part of each amount that keeps the pool balanced is fee-free; only
    the excess over the weighted-average balance ratio pays the swap fee.

    Formula:
        invariant_ratio = prod((B_i + a_i') / B_i)^w_i
        bpt_out = supply * (invariant_ratio - 1)
    """
    _check_balances(balances, normalized_weights)

    balance_ratios_with_fee = []
    invariant_ratio_with_fees = ZERO
    for balance, weight, amount in zip(balances, normalized_weights, amounts_in, strict=True):
        ratio = balance.add(amount).div_down(balance)
        balance_ratios_with_fee.append(ratio)
        invariant_ratio_with_fees = invariant_ratio_with_fees.add(ratio.mul_down(weight))

    invariant_ratio = ONE
    for i, balance in enumerate(balances):
        amount = amounts_in[i]
        if balance_ratios_with_fee[i] > invariant_ratio_with_fees:
            if invariant_ratio_with_fees > ONE:
                non_taxable = balance.mul_down(invariant_ratio_with_fees.sub(ONE))
            else:
                non_taxable = ZERO
            fee_amount = amount.sub(non_taxable).mul_up(swap_fee)
            amount_without_fee = amount.sub(fee_amount)
        else:
            amount_without_fee = amount

        balance_ratio = balance.add(amount_without_fee).div_down(balance)
        invariant_ratio = invariant_ratio.mul_down(
            _pow_down(balance_ratio, normalized_weights[i], version)
        )

    if invariant_ratio > ONE:
        return bpt_total_supply.mul_down(invariant_ratio.sub(ONE))
    return ZERO


def calc_token_in_given_exact_bpt_out(
    balance: Bfp,
    normalized_weight: Bfp,
    bpt_amount_out: Bfp,
    bpt_total_supply: Bfp,
    swap_fee: Bfp,
    *,
    version: PowVersion = "v0",
) -> Bfp:
    """Single-token amount needed to mint exactly bpt_amount_out.

    Raises:
        InvariantRatioError: If the join would grow the invariant beyond 3x (BAL#307)
    """
    _check_balances([balance], [normalized_weight])
    invariant_ratio = bpt_total_supply.add(bpt_amount_out).div_up(bpt_total_supply)
    if invariant_ratio.value > MAX_INVARIANT_RATIO:
        raise InvariantRatioError(
            f"Invariant ratio {invariant_ratio.value} exceeds {MAX_INVARIANT_RATIO}"
        )

    balance_ratio = _pow_up(invariant_ratio, ONE.div_up(normalized_weight), version)
    amount_in_without_fee = balance.mul_up(balance_ratio.sub(ONE))

    # Only the share not already owned by the pool's other tokens is a swap
    taxable_amount = amount_in_without_fee.mul_up(normalized_weight.complement())
    non_taxable_amount = amount_in_without_fee.sub(taxable_amount)
    return non_taxable_amount.add(taxable_amount.div_up(swap_fee.complement()))


def calc_bpt_in_given_exact_tokens_out(
    balances: Sequence[Bfp],
    normalized_weights: Sequence[Bfp],
    amounts_out: Sequence[Bfp],
    bpt_total_supply: Bfp,
    swap_fee: Bfp,
    *,
    version: PowVersion = "v0",
) -> Bfp:
    """BPT burned to withdraw an exact set of token amounts."""
    _check_balances(balances, normalized_weights)

    balance_ratios_without_fee = []
    invariant_ratio_without_fees = ZERO
    for balance, weight, amount in zip(balances, normalized_weights, amounts_out, strict=True):
        ratio = balance.sub(amount).div_up(balance)
        balance_ratios_without_fee.append(ratio)
        invariant_ratio_without_fees = invariant_ratio_without_fees.add(ratio.mul_up(weight))

    invariant_ratio = ONE
    for i, balance in enumerate(balances):
        amount = amounts_out[i]
        if invariant_ratio_without_fees > balance_ratios_without_fee[i]:
            non_taxable = balance.mul_down(invariant_ratio_without_fees.complement())
            taxable = amount.sub(non_taxable)
            amount_out_with_fee = non_taxable.add(taxable.div_up(swap_fee.complement()))
        else:
            amount_out_with_fee = amount

        balance_ratio = balance.sub(amount_out_with_fee).div_down(balance)
        invariant_ratio = invariant_ratio.mul_down(
            _pow_down(balance_ratio, normalized_weights[i], version)
        )

    return bpt_total_supply.mul_up(invariant_ratio.complement())


def calc_token_out_given_exact_bpt_in(
    balance: Bfp,
    normalized_weight: Bfp,
    bpt_amount_in: Bfp,
    bpt_total_supply: Bfp,
    swap_fee: Bfp,
    *,
    version: PowVersion = "v0",
) -> Bfp:
    """Single-token amount released by burning exactly bpt_amount_in.

    Raises:
        InvariantRatioError: If the exit would shrink the invariant below 0.7x (BAL#306)
    """
    _check_balances([balance], [normalized_weight])
    invariant_ratio = bpt_total_supply.sub(bpt_amount_in).div_up(bpt_total_supply)
    if invariant_ratio.value < MIN_INVARIANT_RATIO:
        raise InvariantRatioError(
            f"Invariant ratio {invariant_ratio.value} below {MIN_INVARIANT_RATIO}"
        )

    balance_ratio = _pow_up(invariant_ratio, ONE.div_down(normalized_weight), version)
    amount_out_without_fee = balance.mul_down(balance_ratio.complement())

    taxable_amount = amount_out_without_fee.mul_up(normalized_weight.complement())
    non_taxable_amount = amount_out_without_fee.sub(taxable_amount)
    return non_taxable_amount.add(taxable_amount.mul_down(swap_fee.complement()))


def calc_invariant(
    balances: Sequence[Bfp], normalized_weights: Sequence[Bfp], *, version: PowVersion = "v0"
) -> Bfp:
    """prod(B_i ^ w_i), rounded down."""
    _check_balances(balances, normalized_weights)
    invariant = ONE
    for balance, weight in zip(balances, normalized_weights, strict=True):
        invariant = invariant.mul_down(_pow_down(balance, weight, version))
    return invariant
