"""Pool lifecycle rules.

A pool moves through Unlocked <-> Locked and may end in Revoked, after
which neither trading nor lock changes are possible. Ownership of vaults
and the liquidity mint is established only by re-deriving their addresses
from the pool's stored bumps; there is no separate access list.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.config import ProgramConfig
from cpamm.constants import FEE_DENOMINATOR
from cpamm.errors import (
    AddressMismatch,
    AlreadyRevoked,
    ConfigError,
    InvalidLockState,
    PoolLocked,
    Unauthorized,
)
from cpamm.ledger.base import AddressDeriver
from cpamm.ledger.derivation import liquidity_mint_seeds, pool_seeds, vault_seeds, with_bump
from cpamm.models.pool import LockState, Pool, PoolBumps
from cpamm.models.types import encode_pubkey

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolAddresses:
    """Addresses supplied for (or derived for) a pool's accounts.

    Roles left as None are not checked.
    """

    pool: bytes
    liquidity_mint: bytes | None = None
    vault_x: bytes | None = None
    vault_y: bytes | None = None


def derive_addresses(
    seed: int,
    asset_x: bytes,
    asset_y: bytes,
    config: ProgramConfig,
    deriver: AddressDeriver,
) -> tuple[PoolAddresses, PoolBumps]:
    """Derive the canonical addresses and bumps of a new pool."""
    pool_address, pool_bump = deriver.find_address(pool_seeds(seed), config.program_id)
    mint_address, mint_bump = deriver.find_address(
        liquidity_mint_seeds(pool_address), config.program_id
    )
    vault_x, x_bump = deriver.find_address(vault_seeds(asset_x, pool_address), config.program_id)
    vault_y, y_bump = deriver.find_address(vault_seeds(asset_y, pool_address), config.program_id)
    return (
        PoolAddresses(
            pool=pool_address,
            liquidity_mint=mint_address,
            vault_x=vault_x,
            vault_y=vault_y,
        ),
        PoolBumps(pool=pool_bump, liquidity=mint_bump, x_vault=x_bump, y_vault=y_bump),
    )


def initialize(
    seed: int,
    authority: bytes,
    fee_bps: int,
    bumps: PoolBumps,
    asset_x: bytes,
    asset_y: bytes,
    candidates: PoolAddresses,
    config: ProgramConfig,
    deriver: AddressDeriver,
) -> Pool:
    """Build a new Unlocked pool and verify its asserted addresses.

    Raises:
        ConfigError: If fee_bps is not below 10000
        AddressMismatch: If any candidate address does not re-derive from its bump
    """
    if fee_bps >= FEE_DENOMINATOR:
        raise ConfigError(f"Fee must be below {FEE_DENOMINATOR} bps, got {fee_bps}")

    pool = Pool(
        seed=seed,
        authority=authority,
        asset_x=asset_x,
        asset_y=asset_y,
        fee_bps=fee_bps,
        lock_state=LockState.UNLOCKED,
        pool_bump=bumps.pool,
        liquidity_bump=bumps.liquidity,
        x_vault_bump=bumps.x_vault,
        y_vault_bump=bumps.y_vault,
    )
    validate_derived_addresses(pool, candidates, config, deriver)
    return pool


def validate_not_locked(pool: Pool) -> None:
    """Reject trading unless the pool is Unlocked.

    Raises:
        PoolLocked: If the pool is Locked or Revoked
    """
    if not pool.is_trading_enabled:
        raise PoolLocked(f"Pool is {pool.lock_state.name.lower()}")


def set_lock_state(pool: Pool, requested: int, signer: bytes) -> Pool:
    """Change the lock state on behalf of signer.

    Revocation is checked first, so every call against a Revoked pool fails
    with AlreadyRevoked regardless of who signs it.

    Raises:
        AlreadyRevoked: If the pool is Revoked
        Unauthorized: If signer is not the pool authority
        InvalidLockState: If requested is not Unlocked or Locked
    """
    if pool.lock_state == LockState.REVOKED:
        raise AlreadyRevoked("Pool lock state is revoked")
    if signer != pool.authority:
        raise Unauthorized("Signer is not the pool authority")
    if requested not in (LockState.UNLOCKED, LockState.LOCKED):
        raise InvalidLockState(f"Lock state must be 0 or 1, got {requested}")

    pool.lock_state = LockState(requested)
    return pool


def pool_addresses(pool: Pool, config: ProgramConfig, deriver: AddressDeriver) -> PoolAddresses:
    """Recompute a stored pool's addresses from its bumps."""
    program_id = config.program_id
    address = deriver.create_address(with_bump(pool_seeds(pool.seed), pool.pool_bump), program_id)
    return PoolAddresses(
        pool=address,
        liquidity_mint=deriver.create_address(
            with_bump(liquidity_mint_seeds(address), pool.liquidity_bump), program_id
        ),
        vault_x=deriver.create_address(
            with_bump(vault_seeds(pool.asset_x, address), pool.x_vault_bump), program_id
        ),
        vault_y=deriver.create_address(
            with_bump(vault_seeds(pool.asset_y, address), pool.y_vault_bump), program_id
        ),
    )


def validate_derived_addresses(
    pool: Pool,
    candidates: PoolAddresses,
    config: ProgramConfig,
    deriver: AddressDeriver,
) -> None:
    """Recompute every supplied address from the pool's stored bumps.

    The comparison is byte-for-byte and fails closed.

    Raises:
        AddressMismatch: If any supplied address differs from its derivation
    """
    expected = pool_addresses(pool, config, deriver)
    for role in ("pool", "liquidity_mint", "vault_x", "vault_y"):
        supplied = getattr(candidates, role)
        if supplied is not None:
            _compare(role, getattr(expected, role), supplied)


def pool_signer_seeds(pool: Pool) -> list[bytes]:
    """Seeds proving the pool's derived identity to the custodian."""
    return with_bump(pool_seeds(pool.seed), pool.pool_bump)


def _compare(role: str, expected: bytes, supplied: bytes) -> None:
    if expected != supplied:
        logger.warning(
            "address_mismatch",
            role=role,
            expected=encode_pubkey(expected),
            supplied=encode_pubkey(supplied),
        )
        raise AddressMismatch(f"Supplied {role} address does not match its derivation")
