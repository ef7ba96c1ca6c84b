"""Balancer Smart Order Router (SOR) integration.

The SOR only finds a route; the executable call is a Balancer V2 Vault
``batchSwap`` built here from that route, with swap limits derived from
the slippage tolerance.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from dexsolver.domain.auction import CurrentBlockWatcher, Tokens
from dexsolver.domain.dex import Allowance, Order, Side, Slippage, Swap
from dexsolver.domain.eth import Amount, Asset, ChainId, ContractAddress, Gas
from dexsolver.routing import errors, vault
from dexsolver.routing.base import DexProvider
from dexsolver.routing.dto import balancer as dto
from dexsolver.utils import http

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api-v3.balancer.fi/"
VAULT_ADDRESS = "0xBA12222222228d8Ba445958a75a0704d566BF2C8"

# Approximate gas of a single Balancer swap, determined empirically
GAS_PER_SWAP = 88_892

QUOTE_VALIDITY_SECONDS = 120


@dataclass
class SorConfig:
    """Settings for the Balancer SOR provider."""

    settlement: ContractAddress
    chain_id: ChainId = ChainId.MAINNET
    endpoint: str = DEFAULT_URL
    vault: ContractAddress = ContractAddress(VAULT_ADDRESS)
    # Re-run queryBatchSwap on chain so amounts are up to date
    query_batch_swap: bool = False
    block_watcher: Optional[CurrentBlockWatcher] = None
    timeout: float = 30.0


class Sor(DexProvider):
    """Bindings to the Balancer SOR API."""

    def __init__(
        self,
        config: SorConfig,
        transport=None,
        clock: Callable[[], float] = time.time,
    ):
        self.chain = dto.chain_from_domain(config.chain_id)
        self.endpoint = config.endpoint
        self.vault = vault.Vault(config.vault)
        self.settlement = config.settlement
        self.query_batch_swap = config.query_batch_swap
        self.client = http.Client(
            block_watcher=config.block_watcher,
            timeout=config.timeout,
            transport=transport,
        )
        self._clock = clock
        self._requests = http.RequestCounter()

    @property
    def name(self) -> str:
        return "balancer"

    async def swap(
        self,
        order: Order,
        slippage: Slippage,
        tokens: Optional[Tokens] = None,
    ) -> Swap:
        query = dto.Query.from_domain(
            order,
            tokens or Tokens(),
            slippage,
            self.chain,
            self.settlement,
            self.query_batch_swap,
            int(self._clock()) + QUOTE_VALIDITY_SECONDS,
        )
        quote = await self._quote(query)

        if quote.is_empty():
            raise errors.NotFound()

        # swapAmountRaw is always the specified side of the order
        if order.side == Side.BUY:
            input_amount = Amount(quote.return_amount_raw)
            output_amount = Amount(quote.swap_amount_raw)
            max_input, min_output = slippage.add(input_amount), output_amount
        else:
            input_amount = Amount(quote.swap_amount_raw)
            output_amount = Amount(quote.return_amount_raw)
            max_input, min_output = input_amount, slippage.sub(output_amount)

        kind = vault.SwapKind.GIVEN_IN if order.side == Side.SELL else vault.SwapKind.GIVEN_OUT
        steps = [
            vault.BatchSwapStep(
                pool_id=swap.pool_id,
                asset_in_index=swap.asset_in_index,
                asset_out_index=swap.asset_out_index,
                amount=swap.amount,
                user_data=swap.user_data,
            )
            for swap in quote.swaps
        ]
        funds = vault.FundManagement(sender=self.settlement, recipient=self.settlement)
        limits = vault.swap_limits(
            quote.token_addresses,
            str(order.sell),
            str(order.buy),
            max_input,
            min_output,
        )
        call = self.vault.batch_swap(
            kind, steps, quote.token_addresses, funds, limits, vault.MAX_DEADLINE
        )

        return Swap(
            calls=[call],
            input=Asset(token=order.sell, amount=input_amount),
            output=Asset(token=order.buy, amount=output_amount),
            allowance=Allowance(spender=self.vault.address, amount=max_input),
            gas=Gas(len(quote.swaps) * GAS_PER_SWAP),
        )

    async def _quote(self, query: dto.Query) -> dto.Quote:
        request_id = self._requests.next()
        request = self.client.build_request("POST", self.endpoint, json=query.to_body())
        variables = query.variables
        logger.debug(
            f"[balancer #{request_id}] sorGetSwapPaths {variables.swap_type} "
            f"{variables.swap_amount} {variables.token_in} -> {variables.token_out}"
        )
        try:
            response = await http.roundtrip(self.client, request, dto.GetSwapPathsResponse)
        except http.RoundtripError as e:
            logger.debug(f"[balancer #{request_id}] failed: {e}")
            raise map_error(e) from e
        quote = response.data.sor_get_swap_paths
        logger.debug(
            f"[balancer #{request_id}] {len(quote.swaps)} swap(s), "
            f"swap {quote.swap_amount_raw} return {quote.return_amount_raw}"
        )
        return quote

    async def aclose(self) -> None:
        await self.client.aclose()


def map_error(error: http.RoundtripError) -> errors.DexError:
    """Translate a failed round trip into the provider error taxonomy."""
    if error.is_rate_limited:
        return errors.RateLimited()
    return errors.HttpFailure(error.http)
