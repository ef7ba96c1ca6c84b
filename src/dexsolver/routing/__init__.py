"""Swap providers and the dispatcher over them.

Providers:
- 0x: allowance-holder swap API, order amount sent as sellAmount
- 1inch: classic swap API, sell orders, bootstrapped on start-up
- Balancer: Smart Order Router quote settled through a Vault batchSwap
"""

from dexsolver.routing.balancer import Sor, SorConfig
from dexsolver.routing.base import Dex, DexProvider
from dexsolver.routing.errors import (
    ApiError,
    BootstrapTimeout,
    DexError,
    HttpFailure,
    MissingDecimals,
    NotFound,
    OrderNotSupported,
    RateLimited,
    UnsupportedChainId,
)
from dexsolver.routing.factory import create_dex
from dexsolver.routing.oneinch import Liquidity, OneInch, OneInchConfig
from dexsolver.routing.zeroex import ZeroEx, ZeroExConfig

__all__ = [
    # Base classes
    "Dex",
    "DexProvider",
    # Providers
    "OneInch",
    "OneInchConfig",
    "Liquidity",
    "Sor",
    "SorConfig",
    "ZeroEx",
    "ZeroExConfig",
    # Errors
    "ApiError",
    "BootstrapTimeout",
    "DexError",
    "HttpFailure",
    "MissingDecimals",
    "NotFound",
    "OrderNotSupported",
    "RateLimited",
    "UnsupportedChainId",
    # Factory
    "create_dex",
]
