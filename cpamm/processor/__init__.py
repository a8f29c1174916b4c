"""Instruction processors for pool operations."""

from cpamm.processor.context import InvocationContext
from cpamm.processor.dispatch import process_instruction
from cpamm.processor.results import LiquidityResult, SwapExecution

__all__ = [
    "InvocationContext",
    "LiquidityResult",
    "SwapExecution",
    "process_instruction",
]
