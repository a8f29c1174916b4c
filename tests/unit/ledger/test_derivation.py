"""Tests for program-derived address computation."""

import pytest
from solders.pubkey import Pubkey as SoldersPubkey

from cpamm.config import DEFAULT_CONFIG
from cpamm.errors import AddressMismatch
from cpamm.ledger.base import AddressDeriver
from cpamm.ledger.derivation import (
    SoldersAddressDeriver,
    liquidity_mint_seeds,
    pool_seeds,
    vault_seeds,
    with_bump,
)
from tests.helpers import ASSET_X, make_key

PROGRAM_ID = DEFAULT_CONFIG.program_id


@pytest.fixture
def deriver() -> SoldersAddressDeriver:
    return SoldersAddressDeriver()


class TestSeedSets:
    """Seed sets of each pool-controlled account."""

    def test_pool_seed_is_little_endian(self):
        assert pool_seeds(0x0102) == [b"pool", b"\x02\x01" + bytes(6)]

    def test_liquidity_mint_seeds(self):
        pool = make_key("pool")
        assert liquidity_mint_seeds(pool) == [pool]

    def test_vault_seeds_put_asset_first(self):
        pool = make_key("pool")
        assert vault_seeds(ASSET_X, pool) == [ASSET_X, pool]

    def test_with_bump_does_not_mutate(self):
        seeds = [b"a"]
        assert with_bump(seeds, 7) == [b"a", b"\x07"]
        assert seeds == [b"a"]


class TestSoldersAddressDeriver:
    """Tests for find/create against solders."""

    def test_satisfies_protocol(self, deriver):
        assert isinstance(deriver, AddressDeriver)

    def test_find_matches_solders(self, deriver):
        seeds = pool_seeds(1)
        expected, bump = SoldersPubkey.find_program_address(
            seeds, SoldersPubkey.from_bytes(PROGRAM_ID)
        )
        assert deriver.find_address(seeds, PROGRAM_ID) == (bytes(expected), bump)

    def test_create_with_found_bump_round_trips(self, deriver):
        seeds = pool_seeds(42)
        address, bump = deriver.find_address(seeds, PROGRAM_ID)
        assert deriver.create_address(with_bump(seeds, bump), PROGRAM_ID) == address

    def test_create_matches_solders(self, deriver):
        seeds = with_bump(vault_seeds(ASSET_X, make_key("pool")), 200)
        try:
            expected = SoldersPubkey.create_program_address(
                seeds, SoldersPubkey.from_bytes(PROGRAM_ID)
            )
        except ValueError:
            with pytest.raises(AddressMismatch):
                deriver.create_address(seeds, PROGRAM_ID)
            return
        assert deriver.create_address(seeds, PROGRAM_ID) == bytes(expected)

    def test_derived_address_is_off_curve(self, deriver):
        address, _ = deriver.find_address(pool_seeds(3), PROGRAM_ID)
        assert not SoldersPubkey.from_bytes(address).is_on_curve()

    def test_program_id_namespaces_addresses(self, deriver):
        seeds = pool_seeds(1)
        first, _ = deriver.find_address(seeds, PROGRAM_ID)
        second, _ = deriver.find_address(seeds, make_key("other-program"))
        assert first != second

    def test_different_bump_gives_different_address(self, deriver):
        """A non-canonical bump either fails or derives some other address."""
        seeds = pool_seeds(1)
        address, bump = deriver.find_address(seeds, PROGRAM_ID)
        try:
            other = deriver.create_address(with_bump(seeds, bump - 1), PROGRAM_ID)
        except AddressMismatch:
            return
        assert other != address

    def test_too_many_seeds(self, deriver):
        with pytest.raises(AddressMismatch):
            deriver.create_address([b"s"] * 17, PROGRAM_ID)

    def test_seed_too_long(self, deriver):
        with pytest.raises(AddressMismatch):
            deriver.create_address([b"s" * 33], PROGRAM_ID)
