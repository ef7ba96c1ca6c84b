"""0x swap API integration.

Uses the allowance-holder flavour of the 0x v2 swap API, which returns a
ready-to-send transaction. The API only knows ``sellAmount``, so the order
amount is sent as such whatever the side.
API docs: https://0x.org/docs/0x-swap-api/introduction
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from dexsolver.domain.auction import CurrentBlockWatcher, Tokens
from dexsolver.domain.dex import Allowance, Call, Order, Slippage, Swap
from dexsolver.domain.eth import Amount, Asset, ContractAddress, Gas
from dexsolver.routing import errors
from dexsolver.routing.base import DexProvider
from dexsolver.routing.dto import zeroex as dto
from dexsolver.utils import http

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api.0x.org/swap/allowance-holder/"
API_VERSION = "v2"


@dataclass
class ZeroExConfig:
    """Settings for the 0x provider."""

    api_key: str
    settlement: ContractAddress
    chain_id: int = 1
    endpoint: str = DEFAULT_URL
    excluded_sources: list[str] = field(default_factory=list)
    block_watcher: Optional[CurrentBlockWatcher] = None
    timeout: float = 30.0


class ZeroEx(DexProvider):
    """Bindings to the 0x swap API."""

    def __init__(self, config: ZeroExConfig, transport=None):
        self.endpoint = config.endpoint
        self.client = http.Client(
            headers={"0x-api-key": config.api_key, "0x-version": API_VERSION},
            block_watcher=config.block_watcher,
            timeout=config.timeout,
            transport=transport,
        )
        self.defaults = dto.Query(
            chain_id=config.chain_id,
            taker=str(config.settlement),
            excluded_sources=config.excluded_sources,
        )
        self._requests = http.RequestCounter()

    @property
    def name(self) -> str:
        return "zeroex"

    async def swap(
        self,
        order: Order,
        slippage: Slippage,
        tokens: Optional[Tokens] = None,
    ) -> Swap:
        query = self.defaults.with_domain(order, slippage)
        quote = await self._quote(query)

        if not quote.liquidity_available:
            raise errors.NotFound()

        spender = ContractAddress(quote.transaction.to)
        sell_amount = Amount(quote.sell_amount)
        return Swap(
            calls=[Call(to=spender, calldata=quote.transaction.data)],
            input=Asset(token=order.sell, amount=sell_amount),
            output=Asset(token=order.buy, amount=slippage.sub(Amount(quote.buy_amount))),
            allowance=Allowance(spender=spender, amount=sell_amount),
            gas=Gas(quote.transaction.gas),
        )

    async def _quote(self, query: dto.Query) -> dto.Quote:
        request_id = self._requests.next()
        request = self.client.build_request(
            "GET", http.join(self.endpoint, "quote"), params=query.to_params()
        )
        logger.debug(f"[zeroex #{request_id}] GET quote {query.sell_token} -> {query.buy_token}")
        try:
            quote = await http.roundtrip(self.client, request, dto.Quote, dto.Error)
        except http.RoundtripError as e:
            logger.debug(f"[zeroex #{request_id}] failed: {e}")
            raise map_error(e) from e
        logger.debug(
            f"[zeroex #{request_id}] sell {quote.sell_amount} buy {quote.buy_amount}"
        )
        return quote

    async def aclose(self) -> None:
        await self.client.aclose()


def map_error(error: http.RoundtripError) -> errors.DexError:
    """Translate a failed round trip into the provider error taxonomy."""
    if error.is_rate_limited:
        return errors.RateLimited()
    if error.api is not None:
        return errors.HttpFailure(code=error.api.code, reason=error.api.reason)
    return errors.HttpFailure(error.http)
