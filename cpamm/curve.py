"""Constant-product curve math.

Pure invariant arithmetic for two-asset pools (x * y = k). Inputs are
unsigned 64-bit quantities; intermediate values are computed as checked
128-bit integers through SafeInt, so any overflow, underflow, or division
by zero surfaces as ArithmeticOverflow.

The deposit and withdraw formulas scale the reserves by a fixed-point share
ratio and only then take the difference. This operation order fixes who
absorbs truncation, so it must not be rearranged into an algebraically
equivalent form. Truncation of the ratio is bounded by reserve / precision
units, so a deposit followed by a withdrawal of the same shares can return
at most (2 * reserve + deposit) / precision + 2 units more per asset than
was paid in.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.constants import FEE_DENOMINATOR
from cpamm.errors import ArithmeticOverflow
from cpamm.safe_int import S

__all__ = [
    "SwapQuote",
    "invariant",
    "spot_price",
    "deposit_amounts",
    "withdraw_amounts",
    "new_reserve_out",
    "swap_output",
    "swap_output_with_fee",
]


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against the curve.

    Attributes:
        amount_out: Output delivered to the trader after the fee
        fee: Portion of the raw output retained by the pool
        raw_amount_out: Output before the fee (amount_out + fee)
    """

    amount_out: int
    fee: int
    raw_amount_out: int


def _require_reserves(x: int, y: int) -> None:
    if x == 0 or y == 0:
        raise ArithmeticOverflow(f"Curve requires non-zero reserves, got ({x}, {y})")


def invariant(x: int, y: int) -> int:
    """Return k = x * y for non-zero reserves."""
    _require_reserves(x, y)
    return (S(x) * S(y)).value


def spot_price(x: int, y: int, precision: int) -> int:
    """Price of Y denominated in X, scaled by precision.

    Formula: floor(x * precision / y)

    Raises:
        ArithmeticOverflow: If a reserve is zero or the price does not fit in u64
    """
    _require_reserves(x, y)
    return (S(x) * S(precision) // S(y)).to_u64()


def deposit_amounts(
    x: int,
    y: int,
    total_shares: int,
    shares_requested: int,
    precision: int,
) -> tuple[int, int]:
    """Amounts of X and Y required to mint shares_requested new shares.

    ratio = (total_shares + shares_requested) * precision / total_shares
    deposit = reserve * ratio / precision - reserve

    Args:
        x: Current reserve of X
        y: Current reserve of Y
        total_shares: Current liquidity share supply (must be non-zero)
        shares_requested: Shares to be minted
        precision: Fixed-point scale of the ratio

    Returns:
        Tuple of (deposit_x, deposit_y)
    """
    ratio = (S(total_shares) + S(shares_requested)) * S(precision) // S(total_shares)
    deposit_x = S(x) * ratio // S(precision) - S(x)
    deposit_y = S(y) * ratio // S(precision) - S(y)
    return deposit_x.to_u64(), deposit_y.to_u64()


def withdraw_amounts(
    x: int,
    y: int,
    total_shares: int,
    shares_burned: int,
    precision: int,
) -> tuple[int, int]:
    """Amounts of X and Y released by burning shares_burned shares.

    ratio = (total_shares - shares_burned) * precision / total_shares
    withdraw = reserve - reserve * ratio / precision

    Returns:
        Tuple of (withdraw_x, withdraw_y)
    """
    ratio = (S(total_shares) - S(shares_burned)) * S(precision) // S(total_shares)
    withdraw_x = S(x) - S(x) * ratio // S(precision)
    withdraw_y = S(y) - S(y) * ratio // S(precision)
    return withdraw_x.to_u64(), withdraw_y.to_u64()


def new_reserve_out(reserve_in: int, reserve_out: int, amount_in: int) -> int:
    """Opposing reserve after amount_in is added: k / (reserve_in + amount_in)."""
    k = S(invariant(reserve_in, reserve_out))
    return (k // (S(reserve_in) + S(amount_in))).to_u64()


def swap_output(reserve_in: int, reserve_out: int, amount_in: int) -> int:
    """Output for swapping amount_in against the curve, before fees.

    Formula: reserve_out - k / (reserve_in + amount_in)

    The same function serves both directions; callers order the reserves.
    """
    return (S(reserve_out) - S(new_reserve_out(reserve_in, reserve_out, amount_in))).to_u64()


def swap_output_with_fee(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapQuote:
    """Output for a swap with the pool fee taken from the raw output.

    amount_out = raw * (10000 - fee_bps) / 10000, floored so truncation
    stays with the pool; fee = raw - amount_out.
    """
    raw = S(swap_output(reserve_in, reserve_out, amount_in))
    amount_out = raw * (S(FEE_DENOMINATOR) - S(fee_bps)) // FEE_DENOMINATOR
    fee = raw - amount_out
    return SwapQuote(
        amount_out=amount_out.to_u64(),
        fee=fee.to_u64(),
        raw_amount_out=raw.value,
    )
