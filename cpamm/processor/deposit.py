"""Deposit: add both assets in proportion and receive liquidity shares."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm import curve, state
from cpamm.errors import ConfigError
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import DepositArgs
from cpamm.models.types import encode_pubkey
from cpamm.processor.checks import (
    load_pool,
    require_at_most,
    require_not_expired,
    require_signer,
    require_token_program,
    unpack_accounts,
)
from cpamm.processor.context import InvocationContext
from cpamm.processor.results import LiquidityResult

logger = structlog.get_logger()

ACCOUNT_COUNT = 9


def process(
    ctx: InvocationContext,
    accounts: Sequence[AccountRef],
    args: DepositArgs,
) -> LiquidityResult:
    """Mint args.amount shares for at most (max_x, max_y).

    Accounts:
        0. user (signer)
        1. liquidity mint
        2. user X holding
        3. user Y holding
        4. user liquidity holding
        5. vault X
        6. vault Y
        7. pool record
        8. token service

    An empty pool (no shares, no reserves) takes exactly (max_x, max_y);
    this first deposit sets the initial price and must mint shares.
    """
    (
        user,
        liquidity_mint,
        user_x,
        user_y,
        user_liquidity,
        vault_x,
        vault_y,
        pool_account,
        token_program,
    ) = unpack_accounts(accounts, ACCOUNT_COUNT, "Deposit")

    require_signer(user, "user")
    require_token_program(token_program, ctx.config)
    require_not_expired(ctx.ledger, args.expiration)
    pool = load_pool(ctx.ledger, pool_account, ctx.config)
    state.validate_not_locked(pool)
    state.validate_derived_addresses(
        pool,
        state.PoolAddresses(
            pool=pool_account.key,
            liquidity_mint=liquidity_mint.key,
            vault_x=vault_x.key,
            vault_y=vault_y.key,
        ),
        ctx.config,
        ctx.deriver,
    )

    custodian = ctx.custodian
    reserve_x = custodian.balance(vault_x.key)
    reserve_y = custodian.balance(vault_y.key)
    total_shares = custodian.supply(liquidity_mint.key)

    bootstrap = total_shares == 0 and reserve_x == 0 and reserve_y == 0
    if bootstrap:
        # A pool holding reserves but no shares can never be priced again
        if args.amount == 0 or args.max_x == 0 or args.max_y == 0:
            raise ConfigError("First deposit must mint shares and fund both reserves")
        amount_x, amount_y = args.max_x, args.max_y
    else:
        amount_x, amount_y = curve.deposit_amounts(
            reserve_x, reserve_y, total_shares, args.amount, ctx.config.precision
        )
        require_at_most("deposit X", amount_x, args.max_x)
        require_at_most("deposit Y", amount_y, args.max_y)

    decimals_x = custodian.decimals(pool.asset_x)
    decimals_y = custodian.decimals(pool.asset_y)
    decimals_liquidity = custodian.decimals(liquidity_mint.key)

    custodian.transfer(user_x.key, vault_x.key, user.key, amount_x, decimals_x)
    custodian.transfer(user_y.key, vault_y.key, user.key, amount_y, decimals_y)
    custodian.mint_to(
        liquidity_mint.key,
        user_liquidity.key,
        pool_account.key,
        args.amount,
        decimals_liquidity,
        signer_seeds=state.pool_signer_seeds(pool),
    )

    logger.info(
        "deposit_executed",
        pool=encode_pubkey(pool_account.key),
        shares=args.amount,
        amount_x=amount_x,
        amount_y=amount_y,
        bootstrap=bootstrap,
    )
    return LiquidityResult(
        amount_x=amount_x, amount_y=amount_y, shares=args.amount, bootstrap=bootstrap
    )
