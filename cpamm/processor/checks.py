"""Validation steps shared by the instruction processors.

Each helper raises on failure and returns nothing (or the loaded value),
so processors read as a straight sequence of checks.
"""

from __future__ import annotations

from collections.abc import Sequence

from cpamm.config import ProgramConfig
from cpamm.errors import (
    ExpiredRequest,
    IllegalOwner,
    IncorrectProgramId,
    MissingSignature,
    NotEnoughAccounts,
    SlippageExceeded,
)
from cpamm.ledger.base import AccountRef, Ledger
from cpamm.models.pool import Pool
from cpamm.models.types import encode_pubkey


def unpack_accounts(
    accounts: Sequence[AccountRef],
    count: int,
    instruction: str,
) -> Sequence[AccountRef]:
    """Return the first count accounts.

    Raises:
        NotEnoughAccounts: If fewer than count accounts were supplied
    """
    if len(accounts) < count:
        raise NotEnoughAccounts(f"{instruction} requires {count} accounts, got {len(accounts)}")
    return accounts[:count]


def require_signer(account: AccountRef, role: str) -> None:
    if not account.is_signer:
        raise MissingSignature(f"{role} {encode_pubkey(account.key)} must sign")


def require_token_program(account: AccountRef, config: ProgramConfig) -> None:
    if account.key != config.token_program_id:
        raise IncorrectProgramId(
            f"Unexpected token service {encode_pubkey(account.key)}"
        )


def require_not_expired(ledger: Ledger, expiration: int) -> None:
    """Requests are valid up to and including their expiration second."""
    now = ledger.now()
    if now > expiration:
        raise ExpiredRequest(f"Request expired at {expiration}, now {now}")


def load_pool(ledger: Ledger, account: AccountRef, config: ProgramConfig) -> Pool:
    """Load a pool record after checking it belongs to this program.

    Raises:
        IllegalOwner: If the record is missing or owned by another namespace
        InvalidRecord: If the record bytes are not a valid pool
    """
    owner = ledger.owner_of(account.key)
    if owner != config.program_id:
        raise IllegalOwner(f"Pool record {encode_pubkey(account.key)} is not owned by this program")
    return Pool.from_bytes(ledger.read(account.key))


def require_at_most(label: str, required: int, maximum: int) -> None:
    if required > maximum:
        raise SlippageExceeded(f"{label}: required {required} exceeds maximum {maximum}")


def require_at_least(label: str, received: int, minimum: int) -> None:
    if received < minimum:
        raise SlippageExceeded(f"{label}: received {received} below minimum {minimum}")
