"""Configuration for the pool engine and the HTTP service."""

import os
from dataclasses import dataclass, field

from amm_pool.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE


@dataclass(frozen=True)
class PoolConfig:
    """Immutable pricing parameters of a pool.

    Attributes:
        fee_numerator: Swap fee numerator (default: 30)
        fee_denominator: Swap fee denominator (default: 10,000)
        price_scale: Fixed-point multiplier for spot prices (default: 1e18)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    price_scale: int = PRICE_SCALE

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not (0 <= self.fee_numerator < self.fee_denominator):
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}): {self.fee_numerator}"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ServiceSettings:
    """Settings for the HTTP service, read from AMM_* environment variables.

    The default pool is backed by in-memory ledgers; the authority starts
    with initial_balance of both assets so it can seed the pool.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    asset1: str = "0x" + "11" * 20
    asset2: str = "0x" + "22" * 20
    authority: str = "0x" + "aa" * 20
    pool_address: str = "0x" + "99" * 20
    initial_balance: int = 0
    pool_config: PoolConfig = field(default_factory=PoolConfig)

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """Build settings from environment variables with sensible defaults."""
        defaults = cls()
        return cls(
            host=os.environ.get("AMM_HOST", defaults.host),
            port=int(os.environ.get("AMM_PORT", str(defaults.port))),
            debug=_env_bool("AMM_DEBUG", "false"),
            log_level=os.environ.get("AMM_LOG_LEVEL", defaults.log_level).upper(),
            asset1=os.environ.get("AMM_ASSET1", defaults.asset1),
            asset2=os.environ.get("AMM_ASSET2", defaults.asset2),
            authority=os.environ.get("AMM_AUTHORITY", defaults.authority),
            pool_address=os.environ.get("AMM_POOL_ADDRESS", defaults.pool_address),
            initial_balance=int(os.environ.get("AMM_INITIAL_BALANCE", "0")),
        )
