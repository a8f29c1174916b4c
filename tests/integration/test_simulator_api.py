"""End-to-end pool lifecycle through the simulator service.

Every instruction travels as JSON: base58 account keys and hex instruction
data, exactly as an external client would send them.
"""

import pytest

from cpamm.models.instructions import (
    DepositArgs,
    InitializeArgs,
    InstructionArgs,
    LockArgs,
    SwapArgs,
    WithdrawArgs,
)
from cpamm.models.types import encode_pubkey
from cpamm.state import derive_addresses
from tests.helpers import (
    ASSET_X,
    ASSET_X_DECIMALS,
    ASSET_Y,
    ASSET_Y_DECIMALS,
    AUTHORITY,
    FAR_FUTURE,
    MINT_AUTHORITY,
    USER,
    USER_LIQUIDITY,
    USER_X,
    USER_Y,
)

SEED = 7
FEE_BPS = 100
OPENING_BALANCE = 1_000_000


def meta(key: bytes, signer: bool = False, writable: bool = True) -> dict:
    return {"pubkey": encode_pubkey(key), "isSigner": signer, "isWritable": writable}


class PoolClient:
    """Thin wrapper that builds instruction requests for one pool."""

    def __init__(self, client, simulator):
        self.client = client
        self.config = simulator.config
        self.addresses, _ = derive_addresses(
            SEED, ASSET_X, ASSET_Y, simulator.config, simulator.context.deriver
        )

    @property
    def token_program(self) -> dict:
        return meta(self.config.token_program_id, writable=False)

    def send(self, args: InstructionArgs, accounts: list[dict]):
        return self.client.post(
            "/instructions",
            json={"accounts": accounts, "data": "0x" + args.instruction_data().hex()},
        )

    def balance(self, key: bytes) -> int:
        response = self.client.get(f"/token-accounts/{encode_pubkey(key)}")
        assert response.status_code == 200
        return response.json()["amount"]

    def pool(self) -> dict:
        response = self.client.get(f"/pools/{encode_pubkey(self.addresses.pool)}")
        assert response.status_code == 200
        return response.json()

    def initialize(self):
        return self.send(
            InitializeArgs(seed=SEED, fee=FEE_BPS, authority=AUTHORITY),
            [
                meta(USER, signer=True),
                meta(ASSET_X, writable=False),
                meta(ASSET_Y, writable=False),
                meta(self.addresses.liquidity_mint),
                meta(self.addresses.vault_x),
                meta(self.addresses.vault_y),
                meta(self.addresses.pool),
                self.token_program,
            ],
        )

    def liquidity_accounts(self) -> list[dict]:
        return [
            meta(USER, signer=True),
            meta(self.addresses.liquidity_mint),
            meta(USER_X),
            meta(USER_Y),
            meta(USER_LIQUIDITY),
            meta(self.addresses.vault_x),
            meta(self.addresses.vault_y),
            meta(self.addresses.pool),
            self.token_program,
        ]

    def swap(self, amount: int, minimum: int, source: bytes, destination: bytes):
        return self.send(
            SwapArgs(amount=amount, min=minimum, expiration=FAR_FUTURE),
            [
                meta(USER, signer=True),
                meta(source),
                meta(destination),
                meta(self.addresses.vault_x),
                meta(self.addresses.vault_y),
                meta(self.addresses.pool),
                self.token_program,
            ],
        )

    def lock(self, state: int):
        return self.send(
            LockArgs(state=state),
            [meta(AUTHORITY, signer=True), meta(self.addresses.pool)],
        )


@pytest.fixture
def pool_client(client, simulator) -> PoolClient:
    """Both asset mints and a funded user, provisioned over HTTP."""
    for mint, decimals in ((ASSET_X, ASSET_X_DECIMALS), (ASSET_Y, ASSET_Y_DECIMALS)):
        response = client.post(
            "/mints",
            json={
                "address": encode_pubkey(mint),
                "authority": encode_pubkey(MINT_AUTHORITY),
                "decimals": decimals,
            },
        )
        assert response.status_code == 201
    for holding, mint in ((USER_X, ASSET_X), (USER_Y, ASSET_Y)):
        response = client.post(
            "/token-accounts",
            json={
                "address": encode_pubkey(holding),
                "mint": encode_pubkey(mint),
                "owner": encode_pubkey(USER),
                "amount": OPENING_BALANCE,
            },
        )
        assert response.status_code == 201
    return PoolClient(client, simulator)


@pytest.fixture
def live_pool(pool_client, client) -> PoolClient:
    """Initialized pool bootstrapped to reserves (100_000, 200_000)."""
    assert pool_client.initialize().status_code == 200
    response = client.post(
        "/token-accounts",
        json={
            "address": encode_pubkey(USER_LIQUIDITY),
            "mint": encode_pubkey(pool_client.addresses.liquidity_mint),
            "owner": encode_pubkey(USER),
        },
    )
    assert response.status_code == 201
    response = pool_client.send(
        DepositArgs(amount=1_000, max_x=100_000, max_y=200_000, expiration=FAR_FUTURE),
        pool_client.liquidity_accounts(),
    )
    assert response.status_code == 200
    return pool_client


class TestInitializeOverHttp:
    """Initialize through POST /instructions."""

    def test_returns_pool_record(self, pool_client):
        response = pool_client.initialize()

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["seed"] == SEED
        assert result["authority"] == encode_pubkey(AUTHORITY)
        assert result["asset_x"] == encode_pubkey(ASSET_X)
        assert result["fee_bps"] == FEE_BPS
        assert result["lock_state"] == 0

    def test_pool_view(self, pool_client):
        pool_client.initialize()
        view = pool_client.pool()

        assert view["address"] == encode_pubkey(pool_client.addresses.pool)
        assert view["assetX"] == encode_pubkey(ASSET_X)
        assert view["assetY"] == encode_pubkey(ASSET_Y)
        assert view["vaultX"] == encode_pubkey(pool_client.addresses.vault_x)
        assert view["liquidityMint"] == encode_pubkey(pool_client.addresses.liquidity_mint)
        assert view["feeBps"] == FEE_BPS
        assert view["lockState"] == "unlocked"
        assert (view["reserveX"], view["reserveY"], view["liquiditySupply"]) == (0, 0, 0)

    def test_second_initialize_rejected(self, pool_client):
        pool_client.initialize()
        response = pool_client.initialize()
        assert response.status_code == 400
        assert response.json()["error"] == "ConfigError"


class TestLifecycleOverHttp:
    """Deposit, swap, withdraw and lock against one live pool."""

    def test_bootstrap_reserves(self, live_pool):
        view = live_pool.pool()
        assert (view["reserveX"], view["reserveY"]) == (100_000, 200_000)
        assert view["liquiditySupply"] == 1_000
        assert live_pool.balance(USER_LIQUIDITY) == 1_000

    def test_swap_x_for_y(self, live_pool):
        response = live_pool.swap(1_000, minimum=1_961, source=USER_X, destination=USER_Y)

        assert response.status_code == 200
        assert response.json()["result"] == {
            "amount_in": 1_000,
            "amount_out": 1_961,
            "fee": 20,
            "x_to_y": True,
        }
        view = live_pool.pool()
        assert (view["reserveX"], view["reserveY"]) == (101_000, 198_039)
        assert live_pool.balance(USER_Y) == OPENING_BALANCE - 200_000 + 1_961

    def test_swap_matches_quote(self, live_pool, client):
        quote = client.post(
            "/quote/swap",
            json={
                "reserveIn": 200_000,
                "reserveOut": 100_000,
                "amountIn": 3_000,
                "feeBps": FEE_BPS,
            },
        ).json()

        response = live_pool.swap(3_000, minimum=0, source=USER_Y, destination=USER_X)

        result = response.json()["result"]
        assert result["x_to_y"] is False
        assert (result["amount_out"], result["fee"]) == (quote["amountOut"], quote["fee"])
        assert live_pool.pool()["reserveX"] == 100_000 - quote["amountOut"]

    def test_slippage_rejection_leaves_balances(self, live_pool):
        response = live_pool.swap(1_000, minimum=1_962, source=USER_X, destination=USER_Y)

        assert response.status_code == 400
        assert response.json()["error"] == "SlippageExceeded"
        view = live_pool.pool()
        assert (view["reserveX"], view["reserveY"]) == (100_000, 200_000)

    def test_withdraw_everything_conserves_value(self, live_pool):
        live_pool.swap(1_000, minimum=0, source=USER_X, destination=USER_Y)

        response = live_pool.send(
            WithdrawArgs(amount=1_000, min_x=0, min_y=0, expiration=FAR_FUTURE),
            live_pool.liquidity_accounts(),
        )

        assert response.status_code == 200
        assert response.json()["result"]["shares"] == 1_000
        view = live_pool.pool()
        assert (view["reserveX"], view["reserveY"], view["liquiditySupply"]) == (0, 0, 0)
        assert live_pool.balance(USER_X) == OPENING_BALANCE
        assert live_pool.balance(USER_Y) == OPENING_BALANCE

    def test_lock_blocks_swaps_until_unlocked(self, live_pool):
        assert live_pool.lock(1).status_code == 200
        assert live_pool.pool()["lockState"] == "locked"

        response = live_pool.swap(1_000, minimum=0, source=USER_X, destination=USER_Y)
        assert response.status_code == 400
        assert response.json()["error"] == "PoolLocked"

        assert live_pool.lock(0).status_code == 200
        response = live_pool.swap(1_000, minimum=0, source=USER_X, destination=USER_Y)
        assert response.status_code == 200
