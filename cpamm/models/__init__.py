"""Pydantic models for pool records and instruction payloads."""

from cpamm.models.instructions import (
    DepositArgs,
    InitializeArgs,
    InstructionArgs,
    InstructionKind,
    LockArgs,
    SwapArgs,
    WithdrawArgs,
    decode_instruction,
)
from cpamm.models.pool import POOL_RECORD_SIZE, LockState, Pool, PoolBumps
from cpamm.models.types import I64, U8, U16, U64, Pubkey, decode_pubkey, encode_pubkey

__all__ = [
    # Types
    "Pubkey",
    "U8",
    "U16",
    "U64",
    "I64",
    "decode_pubkey",
    "encode_pubkey",
    # Pool record
    "Pool",
    "PoolBumps",
    "LockState",
    "POOL_RECORD_SIZE",
    # Instructions
    "InstructionKind",
    "InstructionArgs",
    "InitializeArgs",
    "DepositArgs",
    "WithdrawArgs",
    "SwapArgs",
    "LockArgs",
    "decode_instruction",
]
