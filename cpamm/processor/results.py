"""Outcomes reported by successful instructions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LiquidityResult:
    """Amounts moved by a Deposit or Withdraw."""

    amount_x: int
    amount_y: int
    shares: int
    # True when the deposit priced an empty pool from the caller's maxima
    bootstrap: bool = False


@dataclass(frozen=True)
class SwapExecution:
    """Amounts moved by a Swap."""

    amount_in: int
    amount_out: int
    fee: int
    x_to_y: bool


__all__ = ["LiquidityResult", "SwapExecution"]
