"""Withdraw: burn liquidity shares for a proportional slice of both reserves."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm import curve, state
from cpamm.errors import CustodianError
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import WithdrawArgs
from cpamm.models.types import encode_pubkey
from cpamm.processor.checks import (
    load_pool,
    require_at_least,
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
    args: WithdrawArgs,
) -> LiquidityResult:
    """Burn args.amount shares for at least (min_x, min_y).

    Accounts use the same order as Deposit.
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
    ) = unpack_accounts(accounts, ACCOUNT_COUNT, "Withdraw")

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
    amount_x, amount_y = curve.withdraw_amounts(
        custodian.balance(vault_x.key),
        custodian.balance(vault_y.key),
        custodian.supply(liquidity_mint.key),
        args.amount,
        ctx.config.precision,
    )
    require_at_least("withdraw X", amount_x, args.min_x)
    require_at_least("withdraw Y", amount_y, args.min_y)
    held = custodian.balance(user_liquidity.key)
    if held < args.amount:
        raise CustodianError(f"Insufficient shares: holding {held} < {args.amount}")

    decimals_x = custodian.decimals(pool.asset_x)
    decimals_y = custodian.decimals(pool.asset_y)
    decimals_liquidity = custodian.decimals(liquidity_mint.key)
    signer_seeds = state.pool_signer_seeds(pool)

    custodian.transfer(
        vault_x.key, user_x.key, pool_account.key, amount_x, decimals_x, signer_seeds
    )
    custodian.transfer(
        vault_y.key, user_y.key, pool_account.key, amount_y, decimals_y, signer_seeds
    )
    custodian.burn(
        user_liquidity.key, liquidity_mint.key, user.key, args.amount, decimals_liquidity
    )

    logger.info(
        "withdraw_executed",
        pool=encode_pubkey(pool_account.key),
        shares=args.amount,
        amount_x=amount_x,
        amount_y=amount_y,
    )
    return LiquidityResult(amount_x=amount_x, amount_y=amount_y, shares=args.amount)
