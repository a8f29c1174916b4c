"""Test helpers module for shared test utilities.

- constants: Account keys, decimals, and clock values
- factories: Context, pool record, and pool harness factories
"""

from tests.helpers.constants import (
    ASSET_X,
    ASSET_X_DECIMALS,
    ASSET_Y,
    ASSET_Y_DECIMALS,
    ASSET_Z,
    AUTHORITY,
    FAR_FUTURE,
    MINT_AUTHORITY,
    NOW,
    OTHER_USER,
    USER,
    USER_LIQUIDITY,
    USER_X,
    USER_Y,
    USER_Z,
    make_key,
)
from tests.helpers.factories import (
    PoolHarness,
    account,
    make_context,
    make_harness,
    make_pool,
    signer,
)

__all__ = [
    # Constants
    "ASSET_X",
    "ASSET_X_DECIMALS",
    "ASSET_Y",
    "ASSET_Y_DECIMALS",
    "ASSET_Z",
    "AUTHORITY",
    "FAR_FUTURE",
    "MINT_AUTHORITY",
    "NOW",
    "OTHER_USER",
    "USER",
    "USER_LIQUIDITY",
    "USER_X",
    "USER_Y",
    "USER_Z",
    "make_key",
    # Factories
    "PoolHarness",
    "account",
    "make_context",
    "make_harness",
    "make_pool",
    "signer",
]
