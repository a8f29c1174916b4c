"""Tests for pool lifecycle rules and derived-address validation."""

import dataclasses

import pytest

from cpamm import state
from cpamm.config import DEFAULT_CONFIG
from cpamm.errors import (
    AddressMismatch,
    AlreadyRevoked,
    ConfigError,
    InvalidLockState,
    MalformedPayload,
    PoolLocked,
    Unauthorized,
)
from cpamm.ledger.derivation import SoldersAddressDeriver
from cpamm.models.pool import LockState
from tests.helpers import ASSET_X, ASSET_Y, AUTHORITY, OTHER_USER, make_key, make_pool

DERIVER = SoldersAddressDeriver()


def _derived(seed: int = 1):
    return state.derive_addresses(seed, ASSET_X, ASSET_Y, DEFAULT_CONFIG, DERIVER)


def _initialize(fee_bps: int = 30, candidates=None, seed: int = 1):
    addresses, bumps = _derived(seed)
    return state.initialize(
        seed=seed,
        authority=AUTHORITY,
        fee_bps=fee_bps,
        bumps=bumps,
        asset_x=ASSET_X,
        asset_y=ASSET_Y,
        candidates=candidates or addresses,
        config=DEFAULT_CONFIG,
        deriver=DERIVER,
    )


class TestDeriveAddresses:
    """Tests for canonical address derivation."""

    def test_all_roles_distinct(self):
        addresses, _ = _derived()
        keys = {addresses.pool, addresses.liquidity_mint, addresses.vault_x, addresses.vault_y}
        assert len(keys) == 4

    def test_seed_changes_every_address(self):
        first, _ = _derived(1)
        second, _ = _derived(2)
        assert first.pool != second.pool
        assert first.vault_x != second.vault_x

    def test_stored_bumps_reproduce_addresses(self):
        pool = _initialize()
        addresses, _ = _derived()
        assert state.pool_addresses(pool, DEFAULT_CONFIG, DERIVER) == addresses


class TestInitialize:
    """Tests for building a new pool."""

    def test_new_pool_is_unlocked(self):
        pool = _initialize(fee_bps=30)
        assert pool.lock_state is LockState.UNLOCKED
        assert pool.fee_bps == 30
        assert pool.authority == AUTHORITY

    def test_bumps_recorded(self):
        _, bumps = _derived()
        assert _initialize().bumps == bumps

    @pytest.mark.parametrize("fee_bps", [10_000, 65_535])
    def test_fee_must_be_below_denominator(self, fee_bps):
        with pytest.raises(ConfigError):
            _initialize(fee_bps=fee_bps)

    def test_max_fee_accepted(self):
        assert _initialize(fee_bps=9_999).fee_bps == 9_999

    @pytest.mark.parametrize("role", ["pool", "liquidity_mint", "vault_x", "vault_y"])
    def test_wrong_candidate_rejected(self, role):
        addresses, _ = _derived()
        forged = dataclasses.replace(addresses, **{role: make_key(f"forged-{role}")})
        with pytest.raises(AddressMismatch):
            _initialize(candidates=forged)


class TestValidateDerivedAddresses:
    """Derive-and-compare is the only ownership proof."""

    def test_only_supplied_roles_checked(self):
        pool = _initialize()
        addresses, _ = _derived()
        state.validate_derived_addresses(
            pool, state.PoolAddresses(pool=addresses.pool), DEFAULT_CONFIG, DERIVER
        )

    def test_swapped_vaults_rejected(self):
        pool = _initialize()
        addresses, _ = _derived()
        swapped = state.PoolAddresses(
            pool=addresses.pool, vault_x=addresses.vault_y, vault_y=addresses.vault_x
        )
        with pytest.raises(AddressMismatch):
            state.validate_derived_addresses(pool, swapped, DEFAULT_CONFIG, DERIVER)

    def test_vault_of_another_pool_rejected(self):
        pool = _initialize(seed=1)
        own, _ = _derived(seed=1)
        other, _ = _derived(seed=2)
        candidates = state.PoolAddresses(pool=own.pool, vault_x=other.vault_x)
        with pytest.raises(AddressMismatch):
            state.validate_derived_addresses(pool, candidates, DEFAULT_CONFIG, DERIVER)


class TestValidateNotLocked:
    """Trading requires an Unlocked pool."""

    def test_unlocked_passes(self):
        state.validate_not_locked(make_pool(lock_state=LockState.UNLOCKED))

    @pytest.mark.parametrize("lock_state", [LockState.LOCKED, LockState.REVOKED])
    def test_locked_and_revoked_fail(self, lock_state):
        with pytest.raises(PoolLocked):
            state.validate_not_locked(make_pool(lock_state=lock_state))


class TestSetLockState:
    """Authority-gated lock transitions."""

    def test_lock_and_unlock(self):
        pool = make_pool()
        state.set_lock_state(pool, LockState.LOCKED, AUTHORITY)
        assert pool.lock_state is LockState.LOCKED
        state.set_lock_state(pool, LockState.UNLOCKED, AUTHORITY)
        assert pool.lock_state is LockState.UNLOCKED

    def test_same_state_is_accepted(self):
        pool = make_pool(lock_state=LockState.LOCKED)
        state.set_lock_state(pool, LockState.LOCKED, AUTHORITY)
        assert pool.lock_state is LockState.LOCKED

    def test_other_signer_unauthorized(self):
        pool = make_pool()
        with pytest.raises(Unauthorized):
            state.set_lock_state(pool, LockState.LOCKED, OTHER_USER)
        assert pool.lock_state is LockState.UNLOCKED

    @pytest.mark.parametrize("requested", [2, 3, 255])
    def test_invalid_request(self, requested):
        """Revoked cannot be requested; anything else is not a lock state at all."""
        with pytest.raises(InvalidLockState):
            state.set_lock_state(make_pool(), requested, AUTHORITY)

    def test_invalid_request_is_malformed_payload(self):
        with pytest.raises(MalformedPayload):
            state.set_lock_state(make_pool(), 2, AUTHORITY)

    @pytest.mark.parametrize("requested", [0, 1, 2])
    @pytest.mark.parametrize("signer", [AUTHORITY, OTHER_USER])
    def test_revoked_is_terminal(self, requested, signer):
        """Revocation is checked before the signer and the requested state."""
        pool = make_pool(lock_state=LockState.REVOKED)
        with pytest.raises(AlreadyRevoked):
            state.set_lock_state(pool, requested, signer)
        assert pool.lock_state is LockState.REVOKED


class TestPoolSignerSeeds:
    def test_seeds_end_with_bump(self):
        pool = make_pool(seed=9, pool_bump=251)
        assert state.pool_signer_seeds(pool) == [b"pool", (9).to_bytes(8, "little"), bytes([251])]
