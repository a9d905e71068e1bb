"""Construction helpers for pools backed by in-memory ledgers."""

import structlog

from amm_pool.config import DEFAULT_POOL_CONFIG, PoolConfig, ServiceSettings
from amm_pool.ledger import InMemoryLedger
from amm_pool.pool import Pool

logger = structlog.get_logger()


def create_in_memory_pool(
    asset1: str,
    asset2: str,
    authority: str,
    pool_address: str,
    initial_balance: int = 0,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Pool:
    """Create an empty pool whose two assets live in InMemoryLedgers.

    Args:
        asset1: First asset address
        asset2: Second asset address
        authority: Pool authority
        pool_address: Custody account of the pool on both ledgers
        initial_balance: Amount of each asset minted to the authority
        config: Pool pricing parameters

    Returns:
        Pool with zero reserves
    """
    balances = {authority: initial_balance} if initial_balance > 0 else None
    ledger1 = InMemoryLedger(asset1, custodian=pool_address, balances=balances)
    ledger2 = InMemoryLedger(asset2, custodian=pool_address, balances=balances)
    return Pool(ledger1, ledger2, authority=authority, address=pool_address, config=config)


def create_pool_from_settings(settings: ServiceSettings) -> Pool:
    """Create the service's pool from environment-derived settings."""
    pool = create_in_memory_pool(
        asset1=settings.asset1,
        asset2=settings.asset2,
        authority=settings.authority,
        pool_address=settings.pool_address,
        initial_balance=settings.initial_balance,
        config=settings.pool_config,
    )
    logger.info(
        "pool_created",
        pool=pool.address,
        token1=pool.token1,
        token2=pool.token2,
        authority=pool.authority,
        initial_balance=settings.initial_balance,
    )
    return pool
