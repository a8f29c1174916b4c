"""Constant-product two-asset liquidity pools."""

from cpamm.config import DEFAULT_CONFIG, ProgramConfig
from cpamm.processor import InvocationContext, process_instruction

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_CONFIG",
    "InvocationContext",
    "ProgramConfig",
    "process_instruction",
    "__version__",
]
