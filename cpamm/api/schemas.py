"""Request and response models for the simulator service."""

from typing import Annotated, Any

from pydantic import BaseModel, Field

from cpamm.constants import FEE_DENOMINATOR
from cpamm.models.types import U8, U64, Pubkey

# Hex-encoded bytes, optional 0x prefix
HexBytes = Annotated[str, Field(pattern=r"^(0x)?([a-fA-F0-9]{2})*$")]


class AccountMeta(BaseModel):
    """An account passed to an instruction."""

    pubkey: Pubkey
    is_signer: bool = Field(default=False, alias="isSigner")
    is_writable: bool = Field(default=False, alias="isWritable")

    model_config = {"populate_by_name": True}


class InstructionRequest(BaseModel):
    """One instruction to execute against the simulated ledger."""

    program_id: Pubkey | None = Field(
        default=None,
        alias="programId",
        description="Target program; defaults to the configured program.",
    )
    accounts: list[AccountMeta] = Field(default_factory=list)
    data: HexBytes

    model_config = {"populate_by_name": True}

    def data_bytes(self) -> bytes:
        return bytes.fromhex(self.data.removeprefix("0x"))


class InstructionResponse(BaseModel):
    """Outcome of an accepted instruction."""

    status: str = "ok"
    result: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Body returned for a rejected instruction."""

    error: str
    detail: str


class PoolView(BaseModel):
    """A pool record with its current reserves and share supply."""

    address: Pubkey
    seed: U64
    authority: Pubkey
    asset_x: Pubkey = Field(alias="assetX")
    asset_y: Pubkey = Field(alias="assetY")
    fee_bps: int = Field(alias="feeBps")
    lock_state: str = Field(alias="lockState")
    vault_x: Pubkey = Field(alias="vaultX")
    vault_y: Pubkey = Field(alias="vaultY")
    liquidity_mint: Pubkey = Field(alias="liquidityMint")
    reserve_x: int = Field(alias="reserveX")
    reserve_y: int = Field(alias="reserveY")
    liquidity_supply: int = Field(alias="liquiditySupply")

    model_config = {"populate_by_name": True}


class SwapQuoteRequest(BaseModel):
    """Price a swap against explicit reserves."""

    reserve_in: U64 = Field(alias="reserveIn")
    reserve_out: U64 = Field(alias="reserveOut")
    amount_in: U64 = Field(alias="amountIn")
    fee_bps: int = Field(default=0, ge=0, lt=FEE_DENOMINATOR, alias="feeBps")

    model_config = {"populate_by_name": True}


class SwapQuoteResponse(BaseModel):
    """Curve quote for a swap."""

    amount_out: int = Field(alias="amountOut")
    fee: int
    raw_amount_out: int = Field(alias="rawAmountOut")
    new_reserve_out: int = Field(alias="newReserveOut")

    model_config = {"populate_by_name": True}


class MintRequest(BaseModel):
    """Provision an asset definition in the simulated custodian."""

    address: Pubkey
    authority: Pubkey
    decimals: U8 = 6


class TokenAccountRequest(BaseModel):
    """Provision (and optionally fund) a token account."""

    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: U64 = 0


class TokenAccountView(BaseModel):
    """Balance of a token account."""

    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int
