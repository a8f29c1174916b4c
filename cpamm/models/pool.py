"""Pool record and its fixed binary layout.

The record is stored by the ledger as a packed little-endian struct:

    offset  size  field
    0       8     seed            u64
    8       32    authority
    40      32    asset_x
    72      32    asset_y
    104     2     fee_bps         u16
    106     1     lock_state      u8
    107     1     pool_bump       u8
    108     1     liquidity_bump  u8
    109     1     x_vault_bump    u8
    110     1     y_vault_bump    u8
    111     1     padding
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from pydantic import BaseModel, Field, ValidationError

from cpamm.constants import FEE_DENOMINATOR
from cpamm.errors import InvalidRecord
from cpamm.models.types import U8, U64, Pubkey

POOL_LAYOUT = struct.Struct("<Q32s32s32sHBBBBBx")
POOL_RECORD_SIZE = POOL_LAYOUT.size


class LockState(IntEnum):
    """Trading status of a pool."""

    UNLOCKED = 0
    LOCKED = 1
    REVOKED = 2


@dataclass(frozen=True)
class PoolBumps:
    """Bump salts of the four addresses derived for a pool."""

    pool: int
    liquidity: int
    x_vault: int
    y_vault: int


class Pool(BaseModel):
    """Configuration of one trading pair.

    Only lock_state changes after creation.
    """

    seed: U64
    authority: Pubkey
    asset_x: Pubkey
    asset_y: Pubkey
    fee_bps: int = Field(ge=0, lt=FEE_DENOMINATOR, description="Swap fee in basis points")
    lock_state: LockState = LockState.UNLOCKED
    pool_bump: U8
    liquidity_bump: U8
    x_vault_bump: U8
    y_vault_bump: U8

    model_config = {"validate_assignment": True}

    @property
    def bumps(self) -> PoolBumps:
        return PoolBumps(
            pool=self.pool_bump,
            liquidity=self.liquidity_bump,
            x_vault=self.x_vault_bump,
            y_vault=self.y_vault_bump,
        )

    @property
    def is_trading_enabled(self) -> bool:
        return self.lock_state == LockState.UNLOCKED

    def to_bytes(self) -> bytes:
        """Encode the record into its fixed 112-byte layout."""
        return POOL_LAYOUT.pack(
            self.seed,
            self.authority,
            self.asset_x,
            self.asset_y,
            self.fee_bps,
            int(self.lock_state),
            self.pool_bump,
            self.liquidity_bump,
            self.x_vault_bump,
            self.y_vault_bump,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Pool:
        """Decode a record, enforcing exact size and field ranges.

        Raises:
            InvalidRecord: If the data is not a valid pool record
        """
        if len(data) != POOL_RECORD_SIZE:
            raise InvalidRecord(
                f"Pool record must be {POOL_RECORD_SIZE} bytes, got {len(data)}"
            )
        (
            seed,
            authority,
            asset_x,
            asset_y,
            fee_bps,
            lock_state,
            pool_bump,
            liquidity_bump,
            x_vault_bump,
            y_vault_bump,
        ) = POOL_LAYOUT.unpack(data)
        try:
            return cls(
                seed=seed,
                authority=authority,
                asset_x=asset_x,
                asset_y=asset_y,
                fee_bps=fee_bps,
                lock_state=lock_state,
                pool_bump=pool_bump,
                liquidity_bump=liquidity_bump,
                x_vault_bump=x_vault_bump,
                y_vault_bump=y_vault_bump,
            )
        except ValidationError as err:
            raise InvalidRecord(f"Pool record has invalid fields: {err}") from err
