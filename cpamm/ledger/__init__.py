"""Collaborator interfaces and their in-process implementations."""

from cpamm.ledger.base import AccountRef, AddressDeriver, Custodian, Ledger
from cpamm.ledger.derivation import (
    SoldersAddressDeriver,
    liquidity_mint_seeds,
    pool_seeds,
    vault_seeds,
    with_bump,
)
from cpamm.ledger.memory import InMemoryCustodian, InMemoryLedger

__all__ = [
    "AccountRef",
    "AddressDeriver",
    "Custodian",
    "Ledger",
    "SoldersAddressDeriver",
    "InMemoryCustodian",
    "InMemoryLedger",
    "pool_seeds",
    "liquidity_mint_seeds",
    "vault_seeds",
    "with_bump",
]
