"""Interfaces of the collaborators the pool program runs against.

The program never stores balances or records itself. It reads and writes
pool records through a Ledger, moves value through a Custodian, and
recomputes addresses through an AddressDeriver. Any of them may fail; a
failure aborts the invocation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class AccountRef:
    """An account supplied to an instruction.

    Attributes:
        key: 32-byte account address
        is_signer: Whether the invocation carries this account's signature
        is_writable: Whether the instruction may modify the account
    """

    key: bytes
    is_signer: bool = False
    is_writable: bool = False


@runtime_checkable
class Ledger(Protocol):
    """Record storage with ownership and a clock."""

    def owner_of(self, address: bytes) -> bytes | None:
        """Return the namespace owning a record, or None if it does not exist."""
        ...

    def read(self, address: bytes) -> bytes:
        """Return the record bytes stored at address."""
        ...

    def create(self, address: bytes, owner: bytes, data: bytes) -> None:
        """Create a record if absent.

        Raises:
            AccountAlreadyInitialized: If a record already exists at address
        """
        ...

    def write(self, address: bytes, data: bytes) -> None:
        """Overwrite an existing record."""
        ...

    def now(self) -> int:
        """Current unix timestamp in seconds."""
        ...


@runtime_checkable
class Custodian(Protocol):
    """Holds asset balances and executes value movement."""

    def balance(self, account: bytes) -> int:
        """Balance of a token account."""
        ...

    def supply(self, mint: bytes) -> int:
        """Outstanding supply of a mint."""
        ...

    def mint_of(self, account: bytes) -> bytes:
        """Mint of a token account."""
        ...

    def decimals(self, mint: bytes) -> int:
        """Decimals of a mint."""
        ...

    def transfer(
        self,
        source: bytes,
        destination: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
        signer_seeds: Sequence[bytes] | None = None,
    ) -> None:
        """Move amount from source to destination, authorized by authority.

        When signer_seeds is given, the authority is a derived address proven
        by those seeds instead of a transaction signature.
        """
        ...

    def mint_to(
        self,
        mint: bytes,
        destination: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
        signer_seeds: Sequence[bytes] | None = None,
    ) -> None:
        """Create amount new units of mint in destination."""
        ...

    def burn(
        self,
        source: bytes,
        mint: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
    ) -> None:
        """Destroy amount units of mint held in source."""
        ...

    def create_token_account(self, address: bytes, mint: bytes, owner: bytes) -> None:
        """Provision an empty token account."""
        ...

    def create_mint(self, address: bytes, authority: bytes, decimals: int) -> None:
        """Provision a mint with zero supply."""
        ...


@runtime_checkable
class AddressDeriver(Protocol):
    """Deterministic address derivation within a program namespace."""

    def find_address(self, seeds: Sequence[bytes], program_id: bytes) -> tuple[bytes, int]:
        """Derive the canonical address and its bump for seeds."""
        ...

    def create_address(self, seeds: Sequence[bytes], program_id: bytes) -> bytes:
        """Derive the address for seeds that already include the bump.

        Raises:
            AddressMismatch: If the seeds do not produce a valid derived address
        """
        ...
