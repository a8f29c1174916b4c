"""In-process Ledger and Custodian.

Reference implementations of the collaborator protocols. They back the
simulator service and the test-suite; a deployment would bind the program
to a real ledger instead.
"""

from __future__ import annotations

import copy
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from cpamm.constants import U64_MAX
from cpamm.errors import AccountAlreadyInitialized, AddressMismatch, CustodianError
from cpamm.ledger.base import AddressDeriver
from cpamm.models.types import encode_pubkey

logger = structlog.get_logger()


@dataclass
class StoredRecord:
    """A record held by the in-memory ledger."""

    owner: bytes
    data: bytes


class InMemoryLedger:
    """Dictionary-backed Ledger with a controllable clock.

    Args:
        clock: Fixed unix timestamp to report. If None, wall-clock time is used.
    """

    def __init__(self, clock: int | None = None) -> None:
        self._records: dict[bytes, StoredRecord] = {}
        self._clock = clock

    def owner_of(self, address: bytes) -> bytes | None:
        record = self._records.get(address)
        return record.owner if record is not None else None

    def read(self, address: bytes) -> bytes:
        record = self._records.get(address)
        if record is None:
            raise KeyError(f"No record at {encode_pubkey(address)}")
        return record.data

    def create(self, address: bytes, owner: bytes, data: bytes) -> None:
        if address in self._records:
            raise AccountAlreadyInitialized(f"Record already exists at {encode_pubkey(address)}")
        self._records[address] = StoredRecord(owner=owner, data=bytes(data))
        logger.debug("record_created", address=encode_pubkey(address), size=len(data))

    def write(self, address: bytes, data: bytes) -> None:
        record = self._records.get(address)
        if record is None:
            raise KeyError(f"No record at {encode_pubkey(address)}")
        record.data = bytes(data)

    def now(self) -> int:
        if self._clock is not None:
            return self._clock
        return int(time.time())

    def set_clock(self, timestamp: int) -> None:
        """Pin the clock to a fixed timestamp."""
        self._clock = timestamp

    def put(self, address: bytes, owner: bytes, data: bytes) -> None:
        """Store a record unconditionally (test and fixture setup)."""
        self._records[address] = StoredRecord(owner=owner, data=bytes(data))

    def snapshot(self) -> dict[bytes, StoredRecord]:
        """Copy of every record, for restore() after a failed invocation."""
        return copy.deepcopy(self._records)

    def restore(self, snapshot: dict[bytes, StoredRecord]) -> None:
        self._records = snapshot


@dataclass
class TokenAccount:
    """Balance of one asset held for one owner."""

    mint: bytes
    owner: bytes
    amount: int = 0


@dataclass
class MintInfo:
    """An asset definition."""

    authority: bytes
    decimals: int
    supply: int = 0


@dataclass
class CustodianCall:
    """One value-moving call recorded by the in-memory custodian."""

    operation: str
    args: dict[str, Any] = field(default_factory=dict)


class InMemoryCustodian:
    """Dictionary-backed Custodian.

    Outbound transfers and mints authorized by signer seeds are checked by
    re-deriving the authority address under program_id.

    Attributes:
        calls: Value-moving operations executed, in order (for assertions)
    """

    def __init__(self, program_id: bytes, deriver: AddressDeriver) -> None:
        self.program_id = program_id
        self.deriver = deriver
        self.accounts: dict[bytes, TokenAccount] = {}
        self.mints: dict[bytes, MintInfo] = {}
        self.calls: list[CustodianCall] = []

    # --- Queries ---

    def balance(self, account: bytes) -> int:
        return self._account(account).amount

    def supply(self, mint: bytes) -> int:
        return self._mint(mint).supply

    def mint_of(self, account: bytes) -> bytes:
        return self._account(account).mint

    def decimals(self, mint: bytes) -> int:
        return self._mint(mint).decimals

    # --- Value movement ---

    def transfer(
        self,
        source: bytes,
        destination: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
        signer_seeds: Sequence[bytes] | None = None,
    ) -> None:
        src = self._account(source)
        dst = self._account(destination)
        if src.mint != dst.mint:
            raise CustodianError("Transfer between accounts of different mints")
        self._check_decimals(src.mint, decimals)
        self._check_authority(src.owner, authority, signer_seeds)
        if src.amount < amount:
            raise CustodianError(f"Insufficient funds: balance {src.amount} < {amount}")

        src.amount -= amount
        dst.amount += amount
        self.calls.append(
            CustodianCall(
                "transfer",
                {"source": source, "destination": destination, "amount": amount},
            )
        )
        logger.debug(
            "custodian_transfer",
            source=encode_pubkey(source),
            destination=encode_pubkey(destination),
            amount=amount,
        )

    def mint_to(
        self,
        mint: bytes,
        destination: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
        signer_seeds: Sequence[bytes] | None = None,
    ) -> None:
        info = self._mint(mint)
        dst = self._account(destination)
        if dst.mint != mint:
            raise CustodianError("Destination account holds a different mint")
        self._check_decimals(mint, decimals)
        self._check_authority(info.authority, authority, signer_seeds)
        if info.supply + amount > U64_MAX:
            raise CustodianError("Mint supply would exceed u64")

        info.supply += amount
        dst.amount += amount
        self.calls.append(
            CustodianCall("mint_to", {"mint": mint, "destination": destination, "amount": amount})
        )
        logger.debug("custodian_mint", mint=encode_pubkey(mint), amount=amount)

    def burn(
        self,
        source: bytes,
        mint: bytes,
        authority: bytes,
        amount: int,
        decimals: int,
    ) -> None:
        info = self._mint(mint)
        src = self._account(source)
        if src.mint != mint:
            raise CustodianError("Source account holds a different mint")
        self._check_decimals(mint, decimals)
        self._check_authority(src.owner, authority, None)
        if src.amount < amount:
            raise CustodianError(f"Insufficient funds to burn: {src.amount} < {amount}")

        src.amount -= amount
        info.supply -= amount
        self.calls.append(CustodianCall("burn", {"source": source, "mint": mint, "amount": amount}))
        logger.debug("custodian_burn", mint=encode_pubkey(mint), amount=amount)

    # --- Provisioning ---

    def create_token_account(self, address: bytes, mint: bytes, owner: bytes) -> None:
        if address in self.accounts or address in self.mints:
            raise CustodianError(f"Account already exists: {encode_pubkey(address)}")
        self._mint(mint)
        self.accounts[address] = TokenAccount(mint=mint, owner=owner)

    def create_mint(self, address: bytes, authority: bytes, decimals: int) -> None:
        if address in self.accounts or address in self.mints:
            raise CustodianError(f"Account already exists: {encode_pubkey(address)}")
        self.mints[address] = MintInfo(authority=authority, decimals=decimals)

    def credit(self, account: bytes, amount: int) -> None:
        """Issue amount directly into an account (fixture funding)."""
        acct = self._account(account)
        acct.amount += amount
        self._mint(acct.mint).supply += amount

    def snapshot(self) -> tuple[dict[bytes, TokenAccount], dict[bytes, MintInfo]]:
        """Copy of all balances and mints, for restore() after a failed invocation."""
        return copy.deepcopy(self.accounts), copy.deepcopy(self.mints)

    def restore(self, snapshot: tuple[dict[bytes, TokenAccount], dict[bytes, MintInfo]]) -> None:
        self.accounts, self.mints = snapshot

    # --- Helpers ---

    def _account(self, address: bytes) -> TokenAccount:
        account = self.accounts.get(address)
        if account is None:
            raise CustodianError(f"Unknown token account: {encode_pubkey(address)}")
        return account

    def _mint(self, address: bytes) -> MintInfo:
        info = self.mints.get(address)
        if info is None:
            raise CustodianError(f"Unknown mint: {encode_pubkey(address)}")
        return info

    def _check_decimals(self, mint: bytes, decimals: int) -> None:
        if self._mint(mint).decimals != decimals:
            raise CustodianError(
                f"Decimals mismatch: mint has {self._mint(mint).decimals}, got {decimals}"
            )

    def _check_authority(
        self,
        owner: bytes,
        authority: bytes,
        signer_seeds: Sequence[bytes] | None,
    ) -> None:
        if owner != authority:
            raise CustodianError("Authority does not own the account")
        if signer_seeds is None:
            return
        try:
            derived = self.deriver.create_address(signer_seeds, self.program_id)
        except AddressMismatch as err:
            raise CustodianError(f"Invalid signer seeds: {err}") from err
        if derived != authority:
            raise CustodianError("Signer seeds do not derive the authority")
