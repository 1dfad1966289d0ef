"""Balancer stable pool math.

StableSwap invariant and the join/exit formulas of StableMath.sol. Uses
Newton-Raphson iteration for the invariant and for single balances.

All intermediate integer arithmetic goes through SafeInt so an overflow
raises instead of silently wrapping.
"""

from collections.abc import Sequence

from balancer_sdk.errors import (
    InvalidPoolStateError,
    StableGetBalanceDidNotConverge,
    StableInvariantDidNotConverge,
)
from balancer_sdk.math.fixed_point import AMP_PRECISION, ONE, ZERO, Bfp
from balancer_sdk.safe_int import S

# Maximum iterations for Newton-Raphson convergence
_STABLE_MAX_ITERATIONS = 255


def calculate_invariant(amp: int, balances: Sequence[Bfp]) -> Bfp:
    """Calculate StableSwap invariant D using Newton-Raphson iteration.

    Uses Balancer's parameterization where the Newton-Raphson formula uses
    A*n (not A*n^n). The n^n factor is incorporated through the iterative
    d_p calculation.

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Upscaled token balances

    Raises:
        StableInvariantDidNotConverge: If iteration doesn't converge
        InvalidPoolStateError: If any balance is zero
    """
    n_coins = len(balances)
    if n_coins == 0:
        return Bfp(0)

    for i, bal in enumerate(balances):
        if bal.value <= 0:
            raise InvalidPoolStateError(f"Balance at index {i} must be positive")

    sum_balances = S(sum(b.value for b in balances))
    d_prev = sum_balances
    amp_times_n = S(amp) * S(n_coins)

    for _ in range(_STABLE_MAX_ITERATIONS):
        # d_p = D^(n+1) / (n^n * prod(balances)), built one balance at a time
        d_p = d_prev
        for bal in balances:
            d_p = (d_p * d_prev) // (S(n_coins) * S(bal.value))

        term1 = (amp_times_n * sum_balances) // S(AMP_PRECISION)
        numerator = (term1 + d_p * S(n_coins)) * d_prev

        term2 = ((amp_times_n - S(AMP_PRECISION)) * d_prev) // S(AMP_PRECISION)
        denominator = term2 + S(n_coins + 1) * d_p

        d_new = numerator // denominator

        if d_new.abs_diff(d_prev) <= 1:
            return Bfp(d_new.value)

        d_prev = d_new

    raise StableInvariantDidNotConverge(
        f"Stable invariant did not converge after {_STABLE_MAX_ITERATIONS} iterations"
    )


def get_token_balance_given_invariant_and_all_other_balances(
    amp: int,
    balances: Sequence[Bfp],
    invariant: Bfp,
    token_index: int,
) -> Bfp:
    """Solve for balance[token_index] given D and all other balances.

    Matches `_getTokenBalanceGivenInvariantAndAllOtherBalances` in StableMath.sol,
    including its rounding.

    Raises:
        StableGetBalanceDidNotConverge: If iteration doesn't converge
        IndexError: If token_index is out of range
    """
    n_coins = len(balances)
    if token_index < 0 or token_index >= n_coins:
        raise IndexError(f"token_index {token_index} out of range for {n_coins} tokens")

    d = S(invariant.value)
    amp_times_total = S(amp) * S(n_coins)

    # P_D = n * balances[0], then P_D = P_D * balances[j] * n / D
    sum_balances = S(balances[0].value)
    p_d = S(balances[0].value) * S(n_coins)
    for j in range(1, n_coins):
        p_d = (p_d * S(balances[j].value) * S(n_coins)) // d
        sum_balances = sum_balances + S(balances[j].value)

    sum_others = sum_balances - S(balances[token_index].value)
    inv2 = d * d

    amp_times_p_d = amp_times_total * p_d
    if amp_times_p_d == 0:
        raise StableGetBalanceDidNotConverge("amp_times_p_d is zero")
    c = inv2.ceiling_div(amp_times_p_d) * S(AMP_PRECISION) * S(balances[token_index].value)

    b = sum_others + (d // amp_times_total) * S(AMP_PRECISION)

    token_balance = (inv2 + c).ceiling_div(d + b)

    for _ in range(_STABLE_MAX_ITERATIONS):
        prev_token_balance = token_balance

        # tokenBalance = (tokenBalance^2 + c) / (2*tokenBalance + b - invariant)
        numerator = token_balance * token_balance + c
        denominator = S(2) * token_balance + b - d
        if denominator <= 0:
            raise StableGetBalanceDidNotConverge("Denominator became non-positive")

        token_balance = numerator.ceiling_div(denominator)

        if token_balance.abs_diff(prev_token_balance) <= 1:
            return Bfp(token_balance.value)

    raise StableGetBalanceDidNotConverge(
        f"Stable get_balance did not converge after {_STABLE_MAX_ITERATIONS} iterations"
    )


def _sum(balances: Sequence[Bfp]) -> Bfp:
    total = ZERO
    for balance in balances:
        total = total.add(balance)
    return total


def calc_bpt_out_given_exact_tokens_in(
    amp: int,
    balances: Sequence[Bfp],
    amounts_in: Sequence[Bfp],
    bpt_total_supply: Bfp,
    current_invariant: Bfp,
    swap_fee: Bfp,
) -> Bfp:
    """BPT minted for an exact set of token amounts.

    Amounts beyond the balanced (proportional) share pay the swap fee; the
    new invariant is computed from the fee-adjusted balances.
    """
    sum_balances = _sum(balances)

    balance_ratios_with_fee = []
    invariant_ratio_with_fees = ZERO
    for balance, amount in zip(balances, amounts_in, strict=True):
        current_weight = balance.div_down(sum_balances)
        ratio = balance.add(amount).div_down(balance)
        balance_ratios_with_fee.append(ratio)
        invariant_ratio_with_fees = invariant_ratio_with_fees.add(ratio.mul_down(current_weight))

    new_balances = []
    for i, balance in enumerate(balances):
        amount = amounts_in[i]
        if balance_ratios_with_fee[i] > invariant_ratio_with_fees:
            if invariant_ratio_with_fees > ONE:
                non_taxable = balance.mul_down(invariant_ratio_with_fees.sub(ONE))
            else:
                non_taxable = ZERO
            taxable = amount.sub(non_taxable)
            amount_without_fee = non_taxable.add(taxable.mul_down(swap_fee.complement()))
        else:
            amount_without_fee = amount
        new_balances.append(balance.add(amount_without_fee))

    new_invariant = calculate_invariant(amp, new_balances)
    invariant_ratio = new_invariant.div_down(current_invariant)
    if invariant_ratio > ONE:
        return bpt_total_supply.mul_down(invariant_ratio.sub(ONE))
    return ZERO


def calc_token_in_given_exact_bpt_out(
    amp: int,
    balances: Sequence[Bfp],
    token_index: int,
    bpt_amount_out: Bfp,
    bpt_total_supply: Bfp,
    current_invariant: Bfp,
    swap_fee: Bfp,
) -> Bfp:
    """Single-token amount needed to mint exactly bpt_amount_out."""
    new_invariant = (
        bpt_total_supply.add(bpt_amount_out).div_up(bpt_total_supply).mul_up(current_invariant)
    )
    new_balance = get_token_balance_given_invariant_and_all_other_balances(
        amp, balances, new_invariant, token_index
    )
    amount_in_without_fee = new_balance.sub(balances[token_index])

    current_weight = balances[token_index].div_down(_sum(balances))
    taxable = amount_in_without_fee.mul_up(current_weight.complement())
    non_taxable = amount_in_without_fee.sub(taxable)
    return non_taxable.add(taxable.div_up(swap_fee.complement()))


def calc_bpt_in_given_exact_tokens_out(
    amp: int,
    balances: Sequence[Bfp],
    amounts_out: Sequence[Bfp],
    bpt_total_supply: Bfp,
    current_invariant: Bfp,
    swap_fee: Bfp,
) -> Bfp:
    """BPT burned to withdraw an exact set of token amounts."""
    sum_balances = _sum(balances)

    balance_ratios_without_fee = []
    invariant_ratio_without_fees = ZERO
    for balance, amount in zip(balances, amounts_out, strict=True):
        current_weight = balance.div_up(sum_balances)
        ratio = balance.sub(amount).div_up(balance)
        balance_ratios_without_fee.append(ratio)
        invariant_ratio_without_fees = invariant_ratio_without_fees.add(
            ratio.mul_up(current_weight)
        )

    new_balances = []
    for i, balance in enumerate(balances):
        amount = amounts_out[i]
        if invariant_ratio_without_fees > balance_ratios_without_fee[i]:
            non_taxable = balance.mul_down(invariant_ratio_without_fees.complement())
            taxable = amount.sub(non_taxable)
            amount_out_with_fee = non_taxable.add(taxable.div_up(swap_fee.complement()))
        else:
            amount_out_with_fee = amount
        new_balances.append(balance.sub(amount_out_with_fee))

    new_invariant = calculate_invariant(amp, new_balances)
    invariant_ratio = new_invariant.div_down(current_invariant)
    return bpt_total_supply.mul_up(invariant_ratio.complement())


def calc_token_out_given_exact_bpt_in(
    amp: int,
    balances: Sequence[Bfp],
    token_index: int,
    bpt_amount_in: Bfp,
    bpt_total_supply: Bfp,
    current_invariant: Bfp,
    swap_fee: Bfp,
) -> Bfp:
    """Single-token amount released by burning exactly bpt_amount_in."""
    new_invariant = (
        bpt_total_supply.sub(bpt_amount_in).div_up(bpt_total_supply).mul_up(current_invariant)
    )
    new_balance = get_token_balance_given_invariant_and_all_other_balances(
        amp, balances, new_invariant, token_index
    )
    amount_out_without_fee = balances[token_index].sub(new_balance)

    current_weight = balances[token_index].div_down(_sum(balances))
    taxable = amount_out_without_fee.mul_up(current_weight.complement())
    non_taxable = amount_out_without_fee.sub(taxable)
    return non_taxable.add(taxable.mul_down(swap_fee.complement()))
