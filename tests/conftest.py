"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest

from amm_pool.events import PoolEvent
from amm_pool.pool import Pool
from tests.helpers import make_pool


@pytest.fixture
def empty_pool() -> Pool:
    """A WETH/USDC pool with zero reserves and funded accounts."""
    return make_pool()


@pytest.fixture
def pool() -> Pool:
    """A WETH/USDC pool seeded with (1000, 1000)."""
    return make_pool(reserves=(1000, 1000))


@pytest.fixture
def deep_pool() -> Pool:
    """A pool with realistic reserves: 10,000 WETH / 25M USDC."""
    return make_pool(reserves=(10_000 * 10**18, 25_000_000 * 10**6))


@pytest.fixture
def events(pool: Pool) -> Iterator[list[PoolEvent]]:
    """Events emitted by the `pool` fixture after seeding."""
    received: list[PoolEvent] = []
    pool.subscribe(received.append)
    yield received
    pool.unsubscribe(received.append)
