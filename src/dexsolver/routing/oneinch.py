"""1inch DEX aggregator integration.

Before it can quote, the provider resolves the 1inch spender contract and,
when some liquidity sources are excluded, the explicit list of sources to
route through. That setup is retried for a short while on start-up; see
``OneInch.create``.

API docs: https://portal.1inch.dev/documentation/apis/swap/introduction
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dexsolver.domain.auction import CurrentBlockWatcher, Tokens
from dexsolver.domain.dex import Allowance, Call, Order, Slippage, Swap
from dexsolver.domain.eth import Amount, Asset, ContractAddress, Gas
from dexsolver.routing import errors
from dexsolver.routing.base import DexProvider
from dexsolver.routing.bootstrap import (
    INIT_TIMEOUT_SECONDS,
    RETRY_DELAY_SECONDS,
    Bootstrap,
)
from dexsolver.routing.dto import oneinch as dto
from dexsolver.utils import http

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api.1inch.io/v5.0/1/"

# Codes 1inch answers with when it has no route. Not documented anywhere;
# 403 also shows up for addresses it refuses to serve.
NOT_FOUND_CODES = (400, 403)


class LiquidityPolicy(str, Enum):
    ANY = "any"
    ONLY = "only"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class Liquidity:
    """Which 1inch liquidity sources to route through."""

    policy: LiquidityPolicy = LiquidityPolicy.ANY
    sources: tuple[str, ...] = ()

    @classmethod
    def any(cls) -> "Liquidity":
        return cls()

    @classmethod
    def only(cls, sources: list[str]) -> "Liquidity":
        return cls(LiquidityPolicy.ONLY, tuple(sources))

    @classmethod
    def exclude(cls, sources: list[str]) -> "Liquidity":
        return cls(LiquidityPolicy.EXCLUDE, tuple(sources))


@dataclass
class OneInchConfig:
    """Settings for the 1inch provider."""

    settlement: ContractAddress
    endpoint: str = DEFAULT_URL
    api_key: Optional[str] = None
    liquidity: Liquidity = field(default_factory=Liquidity)
    # Referrers get a share of the positive slippage 1inch collects
    referrer: Optional[str] = None
    # Route complexity knobs; 1inch does not document them precisely
    main_route_parts: Optional[int] = None
    connector_tokens: Optional[int] = None
    complexity_level: Optional[int] = None
    block_watcher: Optional[CurrentBlockWatcher] = None
    timeout: float = 30.0


class OneInch(DexProvider):
    """Bindings to the 1inch swap API.

    Build instances with ``create`` (retrying) or ``try_new`` (single
    attempt); the constructor only wires already resolved state.
    """

    def __init__(
        self,
        client: http.Client,
        endpoint: str,
        defaults: dto.Query,
        spender: ContractAddress,
    ):
        self.client = client
        self.endpoint = endpoint
        self.defaults = defaults
        self.spender = spender
        self._requests = http.RequestCounter()

    @property
    def name(self) -> str:
        return "oneinch"

    @classmethod
    async def create(
        cls,
        config: OneInchConfig,
        transport=None,
        timeout: float = INIT_TIMEOUT_SECONDS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        **bootstrap_kwargs,
    ) -> "OneInch":
        """Initialize the provider, retrying until ``timeout`` elapses.

        Raises:
            BootstrapTimeout: if no attempt succeeded in time. There is no
                caller to report to at start-up, so this is meant to stop
                the process.
        """
        bootstrap = Bootstrap(
            lambda: cls.try_new(config, transport=transport),
            name="oneinch solver",
            timeout=timeout,
            retry_delay=retry_delay,
            **bootstrap_kwargs,
        )
        return await bootstrap.run()

    @classmethod
    async def try_new(cls, config: OneInchConfig, transport=None) -> "OneInch":
        """Single initialization attempt."""
        headers = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        client = http.Client(
            headers=headers,
            block_watcher=config.block_watcher,
            timeout=config.timeout,
            transport=transport,
        )
        try:
            protocols = await cls._resolve_protocols(client, config)
            spender = await _get(client, config.endpoint, "approve/spender", dto.Spender)
        except BaseException:
            await client.aclose()
            raise

        settlement = str(config.settlement)
        defaults = dto.Query(
            from_address=settlement,
            protocols=protocols,
            referrer_address=config.referrer or settlement,
            disable_estimate=True,
            main_route_parts=config.main_route_parts,
            connector_tokens=config.connector_tokens,
            complexity_level=config.complexity_level,
        )
        logger.info(
            f"1inch ready: spender {spender.address}, "
            f"protocols {len(protocols) if protocols is not None else 'any'}"
        )
        return cls(client, config.endpoint, defaults, ContractAddress(spender.address))

    @staticmethod
    async def _resolve_protocols(
        client: http.Client, config: OneInchConfig
    ) -> Optional[list[str]]:
        liquidity = config.liquidity
        if liquidity.policy == LiquidityPolicy.ANY:
            return None
        if liquidity.policy == LiquidityPolicy.ONLY:
            return list(liquidity.sources)

        available = await _get(client, config.endpoint, "liquidity-sources", dto.Liquidity)
        excluded = set(liquidity.sources)
        return [protocol.id for protocol in available.protocols if protocol.id not in excluded]

    async def swap(
        self,
        order: Order,
        slippage: Slippage,
        tokens: Optional[Tokens] = None,
    ) -> Swap:
        query = self.defaults.try_with_domain(order, slippage)
        swap = await self._quote(query)

        from_amount = Amount(swap.from_token_amount)
        # Keyed by the order, not by 1inch's token fields
        return Swap(
            calls=[Call(to=ContractAddress(swap.tx.to), calldata=swap.tx.data)],
            input=Asset(token=order.sell, amount=from_amount),
            output=Asset(token=order.buy, amount=Amount(swap.to_token_amount)),
            allowance=Allowance(spender=self.spender, amount=from_amount),
            gas=Gas(swap.tx.gas),
        )

    async def _quote(self, query: dto.Query) -> dto.Swap:
        request_id = self._requests.next()
        request = self.client.build_request(
            "GET", http.join(self.endpoint, "swap"), params=query.to_params()
        )
        logger.debug(
            f"[oneinch #{request_id}] GET swap {query.from_token_address} -> {query.to_token_address}"
        )
        try:
            swap = await http.roundtrip(self.client, request, dto.Swap, dto.Error)
        except http.RoundtripError as e:
            logger.debug(f"[oneinch #{request_id}] failed: {e}")
            raise map_error(e) from e
        logger.debug(
            f"[oneinch #{request_id}] from {swap.from_token_amount} to {swap.to_token_amount}"
        )
        return swap

    async def aclose(self) -> None:
        await self.client.aclose()


async def _get(client: http.Client, endpoint: str, path: str, model):
    request = client.build_request("GET", http.join(endpoint, path))
    try:
        return await http.roundtrip(client, request, model, dto.Error)
    except http.RoundtripError as e:
        raise map_error(e) from e


def map_error(error: http.RoundtripError) -> errors.DexError:
    """Translate a failed round trip into the provider error taxonomy."""
    if error.is_rate_limited:
        return errors.RateLimited()
    if error.api is not None:
        code = error.api.status_code or error.status_code
        if code in NOT_FOUND_CODES:
            return errors.NotFound()
        return errors.ApiError(code, error.api.description or error.api.error or "")
    return errors.HttpFailure(error.http)
