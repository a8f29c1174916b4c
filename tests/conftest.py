"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from cpamm.api.endpoints import get_runtime
from cpamm.api.main import app
from cpamm.api.simulator import Simulator
from tests.helpers.constants import NOW
from tests.helpers.factories import PoolHarness, make_context, make_harness


@pytest.fixture
def ctx():
    """Invocation context over empty in-memory collaborators."""
    return make_context()


@pytest.fixture
def harness() -> PoolHarness:
    """Initialized, empty pool with no fee."""
    return make_harness()


@pytest.fixture
def funded() -> PoolHarness:
    """Pool bootstrapped to reserves (20, 30) with 10 shares outstanding, no fee."""
    h = make_harness()
    h.deposit(10, max_x=20, max_y=30)
    return h


@pytest.fixture
def funded_with_fee() -> PoolHarness:
    """Pool bootstrapped to reserves (20, 30) with a 1% fee."""
    h = make_harness(fee_bps=100)
    h.deposit(10, max_x=20, max_y=30)
    return h


@pytest.fixture
def simulator() -> Simulator:
    """Fresh simulator with a pinned clock."""
    return Simulator(clock=NOW)


@pytest.fixture
def client(simulator: Simulator):
    """Test client whose runtime is the fresh simulator."""
    app.dependency_overrides[get_runtime] = lambda: simulator
    yield TestClient(app)
    app.dependency_overrides.clear()
