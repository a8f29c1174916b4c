"""Swap: trade one pool asset for the other along the curve, net of the fee."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm import curve, state
from cpamm.errors import AddressMismatch
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import SwapArgs
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
from cpamm.processor.results import SwapExecution

logger = structlog.get_logger()

ACCOUNT_COUNT = 7


def process(
    ctx: InvocationContext,
    accounts: Sequence[AccountRef],
    args: SwapArgs,
) -> SwapExecution:
    """Sell args.amount of the source asset for at least args.min of the other.

    Accounts:
        0. user (signer)
        1. user source holding
        2. user destination holding
        3. vault X
        4. vault Y
        5. pool record
        6. token service

    The direction follows from the mint of the source holding. The fee is
    left in the destination vault.
    """
    (
        user,
        user_source,
        user_destination,
        vault_x,
        vault_y,
        pool_account,
        token_program,
    ) = unpack_accounts(accounts, ACCOUNT_COUNT, "Swap")

    require_signer(user, "user")
    require_token_program(token_program, ctx.config)
    require_not_expired(ctx.ledger, args.expiration)
    pool = load_pool(ctx.ledger, pool_account, ctx.config)
    state.validate_not_locked(pool)
    state.validate_derived_addresses(
        pool,
        state.PoolAddresses(pool=pool_account.key, vault_x=vault_x.key, vault_y=vault_y.key),
        ctx.config,
        ctx.deriver,
    )

    custodian = ctx.custodian
    source_mint = custodian.mint_of(user_source.key)
    if source_mint == pool.asset_x:
        x_to_y = True
    elif source_mint == pool.asset_y:
        x_to_y = False
    else:
        raise AddressMismatch("Source holding is not of either pool asset")

    if x_to_y:
        vault_in, vault_out = vault_x, vault_y
        mint_in, mint_out = pool.asset_x, pool.asset_y
    else:
        vault_in, vault_out = vault_y, vault_x
        mint_in, mint_out = pool.asset_y, pool.asset_x

    quote = curve.swap_output_with_fee(
        custodian.balance(vault_in.key),
        custodian.balance(vault_out.key),
        args.amount,
        pool.fee_bps,
    )
    require_at_least("swap output", quote.amount_out, args.min)

    decimals_in = custodian.decimals(mint_in)
    decimals_out = custodian.decimals(mint_out)

    custodian.transfer(user_source.key, vault_in.key, user.key, args.amount, decimals_in)
    # Outbound vault transfers are authorized by the pool's derived identity
    custodian.transfer(
        vault_out.key,
        user_destination.key,
        pool_account.key,
        quote.amount_out,
        decimals_out,
        state.pool_signer_seeds(pool),
    )

    logger.info(
        "swap_executed",
        pool=encode_pubkey(pool_account.key),
        x_to_y=x_to_y,
        amount_in=args.amount,
        amount_out=quote.amount_out,
        fee=quote.fee,
    )
    return SwapExecution(
        amount_in=args.amount,
        amount_out=quote.amount_out,
        fee=quote.fee,
        x_to_y=x_to_y,
    )
