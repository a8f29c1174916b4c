"""Instruction discriminators and fixed-width request payloads.

Instruction data is one discriminator byte followed by a little-endian
payload whose length must match the instruction exactly.
"""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import ClassVar

from pydantic import BaseModel, ValidationError

from cpamm.errors import MalformedPayload
from cpamm.models.types import I64, U8, U16, U64, Pubkey


class InstructionKind(IntEnum):
    """First byte of instruction data."""

    INITIALIZE = 0
    DEPOSIT = 1
    WITHDRAW = 2
    SWAP = 3
    LOCK = 4


class InstructionArgs(BaseModel):
    """Base class for request payloads.

    Subclasses declare their fields in wire order and a matching struct
    layout. Padding bytes are part of the layout only.
    """

    KIND: ClassVar[InstructionKind]
    LAYOUT: ClassVar[struct.Struct]

    model_config = {"frozen": True}

    @classmethod
    def from_bytes(cls, data: bytes) -> InstructionArgs:
        """Decode a payload (without the discriminator byte).

        Raises:
            MalformedPayload: If the length or any field value is invalid
        """
        if len(data) != cls.LAYOUT.size:
            raise MalformedPayload(
                f"{cls.__name__} payload must be {cls.LAYOUT.size} bytes, got {len(data)}"
            )
        values = cls.LAYOUT.unpack(data)
        try:
            return cls(**dict(zip(cls.model_fields, values)))
        except ValidationError as err:
            raise MalformedPayload(f"Invalid {cls.__name__} payload: {err}") from err

    def to_bytes(self) -> bytes:
        """Encode the payload (without the discriminator byte)."""
        return self.LAYOUT.pack(*(getattr(self, name) for name in type(self).model_fields))

    def instruction_data(self) -> bytes:
        """Full instruction data: discriminator followed by the payload."""
        return bytes([self.KIND]) + self.to_bytes()


class InitializeArgs(InstructionArgs):
    """Create a pool: seed, fee in basis points, lock authority."""

    KIND: ClassVar[InstructionKind] = InstructionKind.INITIALIZE
    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QH32s6x")

    seed: U64
    fee: U16
    authority: Pubkey


class DepositArgs(InstructionArgs):
    """Mint `amount` shares paying at most (max_x, max_y)."""

    KIND: ClassVar[InstructionKind] = InstructionKind.DEPOSIT
    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QQQq")

    amount: U64
    max_x: U64
    max_y: U64
    expiration: I64


class WithdrawArgs(InstructionArgs):
    """Burn `amount` shares receiving at least (min_x, min_y)."""

    KIND: ClassVar[InstructionKind] = InstructionKind.WITHDRAW
    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QQQq")

    amount: U64
    min_x: U64
    min_y: U64
    expiration: I64


class SwapArgs(InstructionArgs):
    """Sell `amount` of the source asset receiving at least `min`."""

    KIND: ClassVar[InstructionKind] = InstructionKind.SWAP
    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QQq")

    amount: U64
    min: U64
    expiration: I64


class LockArgs(InstructionArgs):
    """Set the pool lock state."""

    KIND: ClassVar[InstructionKind] = InstructionKind.LOCK
    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<B")

    state: U8


PAYLOAD_TYPES: dict[InstructionKind, type[InstructionArgs]] = {
    InstructionKind.INITIALIZE: InitializeArgs,
    InstructionKind.DEPOSIT: DepositArgs,
    InstructionKind.WITHDRAW: WithdrawArgs,
    InstructionKind.SWAP: SwapArgs,
    InstructionKind.LOCK: LockArgs,
}


def decode_instruction(data: bytes) -> tuple[InstructionKind, InstructionArgs]:
    """Split instruction data into its kind and decoded payload.

    Raises:
        MalformedPayload: On empty data, an unknown discriminator, or a bad payload
    """
    if not data:
        raise MalformedPayload("Instruction data is empty")
    try:
        kind = InstructionKind(data[0])
    except ValueError as err:
        raise MalformedPayload(f"Unknown instruction discriminator: {data[0]}") from err
    return kind, PAYLOAD_TYPES[kind].from_bytes(data[1:])
