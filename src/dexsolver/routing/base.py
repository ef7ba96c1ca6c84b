"""Common interface of the swap providers and the dispatcher over them."""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Optional

from dexsolver.domain.auction import Tokens
from dexsolver.domain.dex import Order, Slippage, Swap
from dexsolver.routing.errors import DexError

logger = logging.getLogger(__name__)


class DexProvider(ABC):
    """A swap provider: given an order and a slippage, produce a swap."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def swap(
        self,
        order: Order,
        slippage: Slippage,
        tokens: Optional[Tokens] = None,
    ) -> Swap:
        """
        Quote ``order`` and build an executable swap.

        Args:
            order: What to trade
            slippage: Tolerance applied to the quoted amounts
            tokens: Auction token metadata (only some providers need it)

        Returns:
            Swap with one or more calls

        Raises:
            DexError: NotFound, RateLimited, HttpFailure or a provider
                specific subclass
        """
        pass

    async def aclose(self) -> None:
        """Release the provider's HTTP resources."""
        pass


class Dex:
    """Dispatches quotes to one configured provider.

    Keeps a tally of failures per error kind for diagnostics.
    """

    def __init__(self, provider: DexProvider):
        self.provider = provider
        self._errors: Counter[str] = Counter()

    @property
    def name(self) -> str:
        return self.provider.name

    async def swap(
        self,
        order: Order,
        slippage: Slippage,
        tokens: Optional[Tokens] = None,
    ) -> Swap:
        logger.debug(
            f"Quoting {order.side.value} {order.amount} {order.sell} -> {order.buy} "
            f"on {self.name} (slippage: {slippage.as_bps()} bps)"
        )
        try:
            swap = await self.provider.swap(order, slippage, tokens)
        except DexError as e:
            self._errors[type(e).__name__] += 1
            if e.recoverable:
                logger.info(f"{self.name} quote failed: {type(e).__name__}: {e}")
            else:
                logger.warning(f"{self.name} quote failed: {type(e).__name__}: {e}")
            raise

        swap.provider = self.name
        logger.info(
            f"Quote from {self.name}: {swap.input.amount} {swap.input.token} -> "
            f"{swap.output.amount} {swap.output.token} (gas: {int(swap.gas)})"
        )
        return swap

    def error_counts(self) -> dict[str, int]:
        return dict(self._errors)

    async def aclose(self) -> None:
        await self.provider.aclose()
