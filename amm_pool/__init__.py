"""Two-asset constant-product AMM pool engine."""

from amm_pool.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm_pool.ledger import AssetLedger, InMemoryLedger, LedgerError
from amm_pool.pool import Pool, Reserves, SwapResult

__version__ = "0.1.0"
__all__ = [
    "AssetLedger",
    "DEFAULT_POOL_CONFIG",
    "InMemoryLedger",
    "LedgerError",
    "Pool",
    "PoolConfig",
    "Reserves",
    "SwapResult",
    "__version__",
]
