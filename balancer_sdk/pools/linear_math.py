"""Balancer linear pool math.

Linear pools hold a main token, its wrapped (yield-bearing) counterpart and
their own BPT. Main balances outside [lower_target, upper_target] pay or earn
a fee; "nominal" balances are the fee-adjusted values. The invariant is
nominal main plus wrapped, all in upscaled main units.
"""

from __future__ import annotations

from dataclasses import dataclass

from balancer_sdk.math.fixed_point import ONE, Bfp
from balancer_sdk.safe_int import S


@dataclass(frozen=True)
class LinearParams:
    fee: Bfp
    lower_target: Bfp
    upper_target: Bfp


def to_nominal(real: Bfp, params: LinearParams) -> Bfp:
    if real < params.lower_target:
        fees = params.lower_target.sub(real).mul_down(params.fee)
        return real.sub(fees)
    if real <= params.upper_target:
        return real
    fees = real.sub(params.upper_target).mul_down(params.fee)
    return real.sub(fees)


def from_nominal(nominal: Bfp, params: LinearParams) -> Bfp:
    if nominal < params.lower_target:
        return nominal.add(params.fee.mul_down(params.lower_target)).div_down(
            ONE.add(params.fee)
        )
    if nominal <= params.upper_target:
        return nominal
    return nominal.sub(params.fee.mul_down(params.upper_target)).div_down(
        ONE.sub(params.fee)
    )


def calc_invariant(nominal_main_balance: Bfp, wrapped_balance: Bfp) -> Bfp:
    return nominal_main_balance.add(wrapped_balance)


def _mul_div_down(a: Bfp, b: Bfp, c: Bfp) -> Bfp:
    return Bfp((S(a.value) * S(b.value) // S(c.value)).value)


def _mul_div_up(a: Bfp, b: Bfp, c: Bfp) -> Bfp:
    return Bfp((S(a.value) * S(b.value)).ceiling_div(S(c.value)).value)


def calc_bpt_out_per_main_in(
    main_in: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    if bpt_supply.value == 0:
        # First join mints BPT 1:1 with the nominal value
        return to_nominal(main_in, params)
    previous_nominal_main = to_nominal(main_balance, params)
    after_nominal_main = to_nominal(main_balance.add(main_in), params)
    delta_nominal_main = after_nominal_main.sub(previous_nominal_main)
    invariant = calc_invariant(previous_nominal_main, wrapped_balance)
    return _mul_div_down(bpt_supply, delta_nominal_main, invariant)


def calc_bpt_in_per_main_out(
    main_out: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    previous_nominal_main = to_nominal(main_balance, params)
    after_nominal_main = to_nominal(main_balance.sub(main_out), params)
    delta_nominal_main = previous_nominal_main.sub(after_nominal_main)
    invariant = calc_invariant(previous_nominal_main, wrapped_balance)
    return _mul_div_up(bpt_supply, delta_nominal_main, invariant)


def calc_main_in_per_bpt_out(
    bpt_out: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    if bpt_supply.value == 0:
        return from_nominal(bpt_out, params)
    previous_nominal_main = to_nominal(main_balance, params)
    invariant = calc_invariant(previous_nominal_main, wrapped_balance)
    delta_nominal_main = _mul_div_up(invariant, bpt_out, bpt_supply)
    after_nominal_main = previous_nominal_main.add(delta_nominal_main)
    new_main_balance = from_nominal(after_nominal_main, params)
    return new_main_balance.sub(main_balance)


def calc_main_out_per_bpt_in(
    bpt_in: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    previous_nominal_main = to_nominal(main_balance, params)
    invariant = calc_invariant(previous_nominal_main, wrapped_balance)
    delta_nominal_main = _mul_div_down(invariant, bpt_in, bpt_supply)
    after_nominal_main = previous_nominal_main.sub(delta_nominal_main)
    new_main_balance = from_nominal(after_nominal_main, params)
    return main_balance.sub(new_main_balance)


def calc_bpt_out_per_wrapped_in(
    wrapped_in: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    if bpt_supply.value == 0:
        return wrapped_in
    nominal_main = to_nominal(main_balance, params)
    previous_invariant = calc_invariant(nominal_main, wrapped_balance)
    new_invariant = calc_invariant(nominal_main, wrapped_balance.add(wrapped_in))
    new_bpt_balance = _mul_div_down(bpt_supply, new_invariant, previous_invariant)
    return new_bpt_balance.sub(bpt_supply)


def calc_bpt_in_per_wrapped_out(
    wrapped_out: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    nominal_main = to_nominal(main_balance, params)
    previous_invariant = calc_invariant(nominal_main, wrapped_balance)
    new_invariant = calc_invariant(nominal_main, wrapped_balance.sub(wrapped_out))
    new_bpt_balance = _mul_div_down(bpt_supply, new_invariant, previous_invariant)
    return bpt_supply.sub(new_bpt_balance)


def calc_wrapped_in_per_bpt_out(
    bpt_out: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    if bpt_supply.value == 0:
        return bpt_out
    nominal_main = to_nominal(main_balance, params)
    previous_invariant = calc_invariant(nominal_main, wrapped_balance)
    new_bpt_balance = bpt_supply.add(bpt_out)
    new_wrapped_balance = _mul_div_up(new_bpt_balance, previous_invariant, bpt_supply).sub(
        nominal_main
    )
    return new_wrapped_balance.sub(wrapped_balance)


def calc_wrapped_out_per_bpt_in(
    bpt_in: Bfp, main_balance: Bfp, wrapped_balance: Bfp, bpt_supply: Bfp, params: LinearParams
) -> Bfp:
    nominal_main = to_nominal(main_balance, params)
    previous_invariant = calc_invariant(nominal_main, wrapped_balance)
    new_bpt_balance = bpt_supply.sub(bpt_in)
    new_wrapped_balance = _mul_div_up(new_bpt_balance, previous_invariant, bpt_supply).sub(
        nominal_main
    )
    return wrapped_balance.sub(new_wrapped_balance)
