"""Test helpers module for shared test utilities.

- constants: Asset and account addresses
- factories: Pool factory and scriptable ledger doubles
"""

from tests.helpers.constants import (
    AUTHORITY,
    DAI,
    FUNDING,
    OUTSIDER,
    POOL_ADDRESS,
    TRADER,
    USDC,
    WETH,
)
from tests.helpers.factories import ScriptedLedger, make_pool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "POOL_ADDRESS",
    "AUTHORITY",
    "TRADER",
    "OUTSIDER",
    "FUNDING",
    # Factories
    "ScriptedLedger",
    "make_pool",
]
