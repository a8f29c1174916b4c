"""Lock: the pool authority enables or disables trading."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cpamm import state
from cpamm.ledger.base import AccountRef
from cpamm.models.instructions import LockArgs
from cpamm.models.pool import Pool
from cpamm.models.types import encode_pubkey
from cpamm.processor.checks import load_pool, require_signer, unpack_accounts
from cpamm.processor.context import InvocationContext

logger = structlog.get_logger()

ACCOUNT_COUNT = 2


def process(
    ctx: InvocationContext,
    accounts: Sequence[AccountRef],
    args: LockArgs,
) -> Pool:
    """Set the lock state of a pool.

    Accounts:
        0. authority (signer)
        1. pool record

    No value moves, so there is no expiration or vault check.
    """
    authority, pool_account = unpack_accounts(accounts, ACCOUNT_COUNT, "Lock")

    require_signer(authority, "authority")
    pool = load_pool(ctx.ledger, pool_account, ctx.config)
    previous = pool.lock_state
    state.set_lock_state(pool, args.state, authority.key)
    ctx.ledger.write(pool_account.key, pool.to_bytes())

    logger.info(
        "lock_state_changed",
        pool=encode_pubkey(pool_account.key),
        previous=previous.name,
        current=pool.lock_state.name,
    )
    return pool
