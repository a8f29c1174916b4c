"""Program configuration.

The program identity is passed explicitly to every validation step rather
than read from a module global, so one process can host several program
instances (tests do this routinely).
"""

import os
from dataclasses import dataclass, field

from cpamm.constants import (
    CURVE_PRECISION,
    DEFAULT_PROGRAM_ID,
    DEFAULT_TOKEN_PROGRAM_ID,
    LIQUIDITY_DECIMALS,
)
from cpamm.models.types import decode_pubkey, encode_pubkey


@dataclass(frozen=True)
class ProgramConfig:
    """Identity and curve parameters of one deployed pool program.

    Attributes:
        program_id: Namespace that owns pool records and derives their addresses
        token_program_id: Identity of the value-transfer service (custodian)
        precision: Fixed-point scale used by deposit/withdraw share ratios
        liquidity_decimals: Decimals of liquidity share mints created by Initialize
    """

    program_id: bytes = field(default_factory=lambda: decode_pubkey(DEFAULT_PROGRAM_ID))
    token_program_id: bytes = field(
        default_factory=lambda: decode_pubkey(DEFAULT_TOKEN_PROGRAM_ID)
    )
    precision: int = CURVE_PRECISION
    liquidity_decimals: int = LIQUIDITY_DECIMALS

    def __post_init__(self) -> None:
        if self.precision <= 0:
            raise ValueError(f"Curve precision must be positive, got {self.precision}")

    @classmethod
    def from_env(cls) -> "ProgramConfig":
        """Build a configuration from environment variables.

        - CPAMM_PROGRAM_ID: base58 program identity
        - CPAMM_TOKEN_PROGRAM_ID: base58 token-service identity
        - CPAMM_PRECISION: share ratio precision (default 1e9)
        """
        return cls(
            program_id=decode_pubkey(os.environ.get("CPAMM_PROGRAM_ID", DEFAULT_PROGRAM_ID)),
            token_program_id=decode_pubkey(
                os.environ.get("CPAMM_TOKEN_PROGRAM_ID", DEFAULT_TOKEN_PROGRAM_ID)
            ),
            precision=int(os.environ.get("CPAMM_PRECISION", str(CURVE_PRECISION))),
        )

    def describe(self) -> dict[str, object]:
        """Loggable view of the configuration."""
        return {
            "program_id": encode_pubkey(self.program_id),
            "token_program_id": encode_pubkey(self.token_program_id),
            "precision": self.precision,
            "liquidity_decimals": self.liquidity_decimals,
        }


# Default configuration instance
DEFAULT_CONFIG = ProgramConfig()
