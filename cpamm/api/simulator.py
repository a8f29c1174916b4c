"""In-process program instance served by the API.

The simulator owns one InvocationContext over the in-memory ledger and
custodian. Invocations are serialized with a lock and rolled back on failure,
standing in for the transaction boundary a real ledger provides.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

import structlog

from cpamm.config import ProgramConfig
from cpamm.errors import AmmError
from cpamm.ledger.base import AccountRef
from cpamm.ledger.derivation import SoldersAddressDeriver
from cpamm.ledger.memory import InMemoryCustodian, InMemoryLedger
from cpamm.processor import InvocationContext, process_instruction

logger = structlog.get_logger()


class Simulator:
    """A pool program bound to in-memory collaborators.

    Args:
        config: Program configuration. If None, it is read from the environment.
        clock: Optional fixed ledger clock
    """

    def __init__(self, config: ProgramConfig | None = None, clock: int | None = None) -> None:
        config = config or ProgramConfig.from_env()
        deriver = SoldersAddressDeriver()
        self.ledger = InMemoryLedger(clock=clock)
        self.custodian = InMemoryCustodian(config.program_id, deriver)
        self.context = InvocationContext(
            ledger=self.ledger,
            custodian=self.custodian,
            config=config,
            deriver=deriver,
        )
        self._lock = threading.Lock()
        logger.info("simulator_started", **config.describe())

    @property
    def config(self) -> ProgramConfig:
        return self.context.config

    def execute(
        self,
        program_id: bytes,
        accounts: Sequence[AccountRef],
        data: bytes,
    ) -> Any:
        """Run one instruction atomically while holding the invocation lock.

        If the instruction fails, every record and balance it touched is
        restored before the error propagates.
        """
        with self._lock:
            records = self.ledger.snapshot()
            balances = self.custodian.snapshot()
            try:
                return process_instruction(self.context, program_id, accounts, data)
            except AmmError:
                self.ledger.restore(records)
                self.custodian.restore(balances)
                raise

    def create_mint(self, address: bytes, authority: bytes, decimals: int) -> None:
        with self._lock:
            self.custodian.create_mint(address, authority, decimals)

    def create_token_account(self, address: bytes, mint: bytes, owner: bytes, amount: int) -> None:
        with self._lock:
            self.custodian.create_token_account(address, mint, owner)
            if amount:
                self.custodian.credit(address, amount)


_default_simulator: Simulator | None = None


def get_default_simulator() -> Simulator:
    """Process-wide simulator, created on first use."""
    global _default_simulator
    if _default_simulator is None:
        _default_simulator = Simulator()
    return _default_simulator
