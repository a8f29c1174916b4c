"""Invocation context shared by all instruction processors."""

from __future__ import annotations

from dataclasses import dataclass, field

from cpamm.config import DEFAULT_CONFIG, ProgramConfig
from cpamm.ledger.base import AddressDeriver, Custodian, Ledger
from cpamm.ledger.derivation import SoldersAddressDeriver


@dataclass
class InvocationContext:
    """Configuration and collaborators for one program instance.

    Attributes:
        ledger: Record storage, ownership, and clock
        custodian: Balance queries and value movement
        config: Program identity and curve parameters
        deriver: Address derivation (defaults to solders-backed derivation)
    """

    ledger: Ledger
    custodian: Custodian
    config: ProgramConfig = DEFAULT_CONFIG
    deriver: AddressDeriver = field(default_factory=SoldersAddressDeriver)
