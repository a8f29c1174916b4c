"""Instruction entry point.

Decodes the discriminator byte, selects the processor, and runs it.
Rejections are logged once here and re-raised unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import structlog

from cpamm.errors import AmmError, IncorrectProgramId
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import InstructionKind, decode_instruction
from cpamm.models.types import encode_pubkey
from cpamm.processor import deposit, initialize, lock, swap, withdraw
from cpamm.processor.context import InvocationContext

logger = structlog.get_logger()

Processor = Callable[[InvocationContext, Sequence[AccountRef], Any], Any]

PROCESSORS: dict[InstructionKind, Processor] = {
    InstructionKind.INITIALIZE: initialize.process,
    InstructionKind.DEPOSIT: deposit.process,
    InstructionKind.WITHDRAW: withdraw.process,
    InstructionKind.SWAP: swap.process,
    InstructionKind.LOCK: lock.process,
}


def process_instruction(
    ctx: InvocationContext,
    program_id: bytes,
    accounts: Sequence[AccountRef],
    data: bytes,
) -> Any:
    """Run one instruction against the context's ledger and custodian.

    Args:
        ctx: Program configuration and collaborators
        program_id: Program the invocation is addressed to
        accounts: Accounts in the order the instruction expects
        data: Discriminator byte followed by the payload

    Returns:
        The processor's result (Pool, LiquidityResult, or SwapExecution)

    Raises:
        AmmError: Any validation, arithmetic, or custodian failure
    """
    kind: InstructionKind | None = None
    try:
        if program_id != ctx.config.program_id:
            raise IncorrectProgramId(f"Instruction addressed to {encode_pubkey(program_id)}")
        kind, args = decode_instruction(data)
        return PROCESSORS[kind](ctx, accounts, args)
    except AmmError as err:
        logger.warning(
            "instruction_rejected",
            instruction=kind.name if kind is not None else None,
            error=err.kind,
            detail=str(err),
        )
        raise
