"""API endpoints for the pool simulator."""

import dataclasses
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException

from cpamm import curve
from cpamm.api.schemas import (
    InstructionRequest,
    InstructionResponse,
    MintRequest,
    PoolView,
    SwapQuoteRequest,
    SwapQuoteResponse,
    TokenAccountRequest,
    TokenAccountView,
)
from cpamm.api.simulator import Simulator, get_default_simulator
from cpamm.ledger.base import AccountRef
from cpamm.models.pool import Pool
from cpamm.models.types import decode_pubkey, encode_pubkey
from cpamm.state import pool_addresses

logger = structlog.get_logger()

router = APIRouter()


def get_runtime() -> Simulator:
    """Dependency provider for the simulator instance.

    Override this in tests to inject a fresh simulator:
        app.dependency_overrides[get_runtime] = lambda: simulator

    Returns:
        The simulator that instructions are executed against.
    """
    return get_default_simulator()


def _parse_address(address: str) -> bytes:
    try:
        return decode_pubkey(address)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _result_payload(result: Any) -> dict[str, Any] | None:
    if result is None:
        return None
    if isinstance(result, Pool):
        return result.model_dump(mode="json")
    if dataclasses.is_dataclass(result):
        return dataclasses.asdict(result)
    return {"value": result}


@router.post("/instructions", response_model_exclude_none=True)
async def execute_instruction(
    request: InstructionRequest,
    runtime: Simulator = Depends(get_runtime),
) -> InstructionResponse:
    """Execute one pool instruction.

    Rejections raise AmmError, which the application maps to HTTP 400 with
    an `{"error": kind, "detail": message}` body. A rejected instruction leaves
    every record and balance unchanged.
    """
    program_id = request.program_id or runtime.config.program_id
    accounts = [
        AccountRef(key=meta.pubkey, is_signer=meta.is_signer, is_writable=meta.is_writable)
        for meta in request.accounts
    ]
    data = request.data_bytes()

    logger.info(
        "received_instruction",
        discriminator=data[0] if data else None,
        account_count=len(accounts),
    )
    result = runtime.execute(program_id, accounts, data)
    return InstructionResponse(result=_result_payload(result))


@router.get("/pools/{address}")
async def get_pool(
    address: str,
    runtime: Simulator = Depends(get_runtime),
) -> PoolView:
    """Decoded pool record together with its reserves and share supply."""
    key = _parse_address(address)
    if runtime.ledger.owner_of(key) != runtime.config.program_id:
        raise HTTPException(status_code=404, detail=f"No pool at {address}")

    pool = Pool.from_bytes(runtime.ledger.read(key))
    addresses = pool_addresses(pool, runtime.config, runtime.context.deriver)

    return PoolView(
        address=key,
        seed=pool.seed,
        authority=pool.authority,
        asset_x=pool.asset_x,
        asset_y=pool.asset_y,
        fee_bps=pool.fee_bps,
        lock_state=pool.lock_state.name.lower(),
        vault_x=addresses.vault_x,
        vault_y=addresses.vault_y,
        liquidity_mint=addresses.liquidity_mint,
        reserve_x=runtime.custodian.balance(addresses.vault_x),
        reserve_y=runtime.custodian.balance(addresses.vault_y),
        liquidity_supply=runtime.custodian.supply(addresses.liquidity_mint),
    )


@router.post("/quote/swap")
async def quote_swap(request: SwapQuoteRequest) -> SwapQuoteResponse:
    """Price a swap against explicit reserves without touching any pool."""
    quote = curve.swap_output_with_fee(
        request.reserve_in, request.reserve_out, request.amount_in, request.fee_bps
    )
    return SwapQuoteResponse(
        amount_out=quote.amount_out,
        fee=quote.fee,
        raw_amount_out=quote.raw_amount_out,
        new_reserve_out=request.reserve_out - quote.raw_amount_out,
    )


@router.post("/mints", status_code=201)
async def create_mint(
    request: MintRequest,
    runtime: Simulator = Depends(get_runtime),
) -> dict[str, str]:
    """Provision an asset definition."""
    runtime.create_mint(request.address, request.authority, request.decimals)
    logger.info("mint_created", address=encode_pubkey(request.address))
    return {"status": "ok"}


@router.post("/token-accounts", status_code=201)
async def create_token_account(
    request: TokenAccountRequest,
    runtime: Simulator = Depends(get_runtime),
) -> dict[str, str]:
    """Provision a token account, crediting it with an opening balance."""
    runtime.create_token_account(request.address, request.mint, request.owner, request.amount)
    logger.info(
        "token_account_created",
        address=encode_pubkey(request.address),
        amount=request.amount,
    )
    return {"status": "ok"}


@router.get("/token-accounts/{address}")
async def get_token_account(
    address: str,
    runtime: Simulator = Depends(get_runtime),
) -> TokenAccountView:
    """Balance and ownership of a token account."""
    key = _parse_address(address)
    account = runtime.custodian.accounts.get(key)
    if account is None:
        raise HTTPException(status_code=404, detail=f"No token account at {address}")
    return TokenAccountView(
        address=key, mint=account.mint, owner=account.owner, amount=account.amount
    )
