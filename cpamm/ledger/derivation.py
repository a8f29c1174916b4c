"""Address derivation for pool accounts.

Each account a pool controls lives at an address derived from a fixed seed
set inside the program namespace:

    pool            [b"pool", seed (u64 little-endian)]
    liquidity mint  [pool address]
    vault X         [asset X, pool address]
    vault Y         [asset Y, pool address]

Recomputing an address from its seeds plus the stored bump is the only
proof that a caller-supplied account belongs to a pool.
"""

from __future__ import annotations

from collections.abc import Sequence

from solders.pubkey import Pubkey as SoldersPubkey

from cpamm.constants import POOL_SEED_TAG
from cpamm.errors import AddressMismatch


def pool_seeds(seed: int) -> list[bytes]:
    """Seeds of the pool record address."""
    return [POOL_SEED_TAG, seed.to_bytes(8, "little")]


def liquidity_mint_seeds(pool_address: bytes) -> list[bytes]:
    """Seeds of the liquidity share mint."""
    return [pool_address]


def vault_seeds(asset: bytes, pool_address: bytes) -> list[bytes]:
    """Seeds of the vault holding one asset of the pool."""
    return [asset, pool_address]


def with_bump(seeds: Sequence[bytes], bump: int) -> list[bytes]:
    """Append the one-byte bump to a seed set."""
    return [*seeds, bytes([bump])]


class SoldersAddressDeriver:
    """AddressDeriver backed by solders' program-derived address functions."""

    def find_address(self, seeds: Sequence[bytes], program_id: bytes) -> tuple[bytes, int]:
        address, bump = SoldersPubkey.find_program_address(
            list(seeds), SoldersPubkey.from_bytes(program_id)
        )
        return bytes(address), bump

    def create_address(self, seeds: Sequence[bytes], program_id: bytes) -> bytes:
        """Re-derive an address from seeds that already end with the bump.

        Raises:
            AddressMismatch: If the seeds exceed the derivation limits or land on the curve
        """
        try:
            address = SoldersPubkey.create_program_address(
                list(seeds), SoldersPubkey.from_bytes(program_id)
            )
        except ValueError as err:
            raise AddressMismatch(f"Seeds do not derive a program address: {err}") from err
        return bytes(address)
