"""Factory for creating swap providers from settings."""

import logging
from typing import Optional

from dexsolver.config import Settings, get_settings
from dexsolver.domain.auction import CurrentBlockWatcher
from dexsolver.domain.eth import ContractAddress
from dexsolver.routing.balancer import Sor, SorConfig
from dexsolver.routing.base import Dex, DexProvider
from dexsolver.routing.oneinch import Liquidity, LiquidityPolicy, OneInch, OneInchConfig
from dexsolver.routing.zeroex import ZeroEx, ZeroExConfig

logger = logging.getLogger(__name__)

PROVIDERS = ("zeroex", "oneinch", "balancer")


def create_block_watcher() -> CurrentBlockWatcher:
    """Create the watcher shared by every provider's HTTP client.

    Embedders that follow the chain must feed it with ``update`` on every
    block; until then requests go out without a block hash header.
    """
    return CurrentBlockWatcher()


def create_zeroex_provider(
    settings: Settings,
    block_watcher: Optional[CurrentBlockWatcher] = None,
) -> ZeroEx:
    """Create the 0x provider."""
    if not settings.zeroex_api_key:
        logger.warning("ZEROEX_API_KEY not set - 0x will reject requests")
    return ZeroEx(
        ZeroExConfig(
            api_key=settings.zeroex_api_key,
            settlement=ContractAddress(settings.settlement_address),
            chain_id=settings.chain_id,
            endpoint=settings.zeroex_endpoint,
            excluded_sources=settings.zeroex_excluded_source_list,
            block_watcher=block_watcher,
            timeout=settings.http_timeout,
        )
    )


def oneinch_liquidity(settings: Settings) -> Liquidity:
    """Parse the configured 1inch liquidity policy."""
    policy = LiquidityPolicy(settings.oneinch_liquidity.lower())
    sources = settings.oneinch_liquidity_source_list
    if policy == LiquidityPolicy.ONLY:
        return Liquidity.only(sources)
    if policy == LiquidityPolicy.EXCLUDE:
        return Liquidity.exclude(sources)
    return Liquidity.any()


async def create_oneinch_provider(
    settings: Settings,
    block_watcher: Optional[CurrentBlockWatcher] = None,
) -> OneInch:
    """Create the 1inch provider, blocking until its setup succeeded.

    Raises:
        BootstrapTimeout: if 1inch could not be initialized in time.
    """
    return await OneInch.create(
        OneInchConfig(
            settlement=ContractAddress(settings.settlement_address),
            endpoint=settings.oneinch_endpoint,
            api_key=settings.oneinch_api_key or None,
            liquidity=oneinch_liquidity(settings),
            referrer=settings.oneinch_referrer,
            main_route_parts=settings.oneinch_main_route_parts,
            connector_tokens=settings.oneinch_connector_tokens,
            complexity_level=settings.oneinch_complexity_level,
            block_watcher=block_watcher,
            timeout=settings.http_timeout,
        )
    )


def create_balancer_provider(
    settings: Settings,
    block_watcher: Optional[CurrentBlockWatcher] = None,
) -> Sor:
    """Create the Balancer SOR provider.

    Raises:
        UnsupportedChainId: if the SOR does not serve the configured chain.
    """
    return Sor(
        SorConfig(
            settlement=ContractAddress(settings.settlement_address),
            chain_id=settings.chain_id,
            endpoint=settings.balancer_sor_endpoint,
            vault=ContractAddress(settings.balancer_vault_address),
            query_batch_swap=settings.balancer_query_batch_swap,
            block_watcher=block_watcher,
            timeout=settings.http_timeout,
        )
    )


async def create_dex(
    kind: str,
    settings: Optional[Settings] = None,
    block_watcher: Optional[CurrentBlockWatcher] = None,
) -> Dex:
    """Create a dispatcher over the provider named ``kind``.

    Args:
        kind: One of ``zeroex``, ``oneinch`` or ``balancer``
        settings: Settings to use (cached environment settings if omitted)
        block_watcher: Shared watcher tagging requests with the latest block
    """
    settings = settings or get_settings()
    kind = kind.lower()

    provider: DexProvider
    if kind == "zeroex":
        provider = create_zeroex_provider(settings, block_watcher)
    elif kind == "oneinch":
        provider = await create_oneinch_provider(settings, block_watcher)
    elif kind == "balancer":
        provider = create_balancer_provider(settings, block_watcher)
    else:
        raise ValueError(f"Unknown provider '{kind}', expected one of {', '.join(PROVIDERS)}")

    logger.info(f"Added {provider.name} provider (chain {settings.chain_id})")
    return Dex(provider)
