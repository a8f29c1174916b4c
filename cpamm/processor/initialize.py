"""Initialize: create a pool record, its two vaults, and its liquidity mint."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm import state
from cpamm.errors import ConfigError
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import InitializeArgs
from cpamm.models.pool import Pool
from cpamm.models.types import encode_pubkey
from cpamm.processor.checks import require_signer, require_token_program, unpack_accounts
from cpamm.processor.context import InvocationContext

logger = structlog.get_logger()

ACCOUNT_COUNT = 8


def process(
    ctx: InvocationContext,
    accounts: Sequence[AccountRef],
    args: InitializeArgs,
) -> Pool:
    """Create a new Unlocked pool.

    Accounts:
        0. initializer (signer)
        1. asset X mint
        2. asset Y mint
        3. liquidity mint (derived from the pool address)
        4. vault X (derived from asset X and the pool address)
        5. vault Y (derived from asset Y and the pool address)
        6. pool record (derived from the seed)
        7. token service

    Returns:
        The stored pool
    """
    (
        initializer,
        asset_x,
        asset_y,
        liquidity_mint,
        vault_x,
        vault_y,
        pool_account,
        token_program,
    ) = unpack_accounts(accounts, ACCOUNT_COUNT, "Initialize")

    require_signer(initializer, "initializer")
    require_token_program(token_program, ctx.config)

    if asset_x.key == asset_y.key:
        raise ConfigError("Pool assets must be distinct")
    # Both assets must be known mints before anything is created
    ctx.custodian.decimals(asset_x.key)
    ctx.custodian.decimals(asset_y.key)

    _, bumps = state.derive_addresses(
        args.seed, asset_x.key, asset_y.key, ctx.config, ctx.deriver
    )
    pool = state.initialize(
        seed=args.seed,
        authority=args.authority,
        fee_bps=args.fee,
        bumps=bumps,
        asset_x=asset_x.key,
        asset_y=asset_y.key,
        candidates=state.PoolAddresses(
            pool=pool_account.key,
            liquidity_mint=liquidity_mint.key,
            vault_x=vault_x.key,
            vault_y=vault_y.key,
        ),
        config=ctx.config,
        deriver=ctx.deriver,
    )

    # Create-if-absent: a second Initialize for the same seed fails here
    ctx.ledger.create(pool_account.key, ctx.config.program_id, pool.to_bytes())

    ctx.custodian.create_token_account(vault_x.key, asset_x.key, pool_account.key)
    ctx.custodian.create_token_account(vault_y.key, asset_y.key, pool_account.key)
    ctx.custodian.create_mint(
        liquidity_mint.key, pool_account.key, ctx.config.liquidity_decimals
    )

    logger.info(
        "pool_initialized",
        pool=encode_pubkey(pool_account.key),
        seed=args.seed,
        fee_bps=args.fee,
        asset_x=encode_pubkey(asset_x.key),
        asset_y=encode_pubkey(asset_y.key),
    )
    return pool
