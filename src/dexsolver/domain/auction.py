"""Auction context the caller passes along with an order."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from dexsolver.domain.eth import TokenAddress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """Metadata known about a token in the current auction."""

    decimals: Optional[int] = None
    symbol: Optional[str] = None


@dataclass
class Tokens:
    """Token metadata keyed by address."""

    tokens: dict[TokenAddress, Token] = field(default_factory=dict)

    def get(self, token: TokenAddress) -> Optional[Token]:
        return self.tokens.get(token)

    def decimals(self, token: TokenAddress) -> Optional[int]:
        meta = self.tokens.get(token)
        return meta.decimals if meta else None


@dataclass(frozen=True)
class BlockInfo:
    """The most recent block seen on chain."""

    number: int
    hash: str


class CurrentBlockWatcher:
    """Holds the latest block so HTTP clients can tag requests with it.

    Whoever follows the chain calls ``update`` on every new block; quote
    logic never reads it.
    """

    def __init__(self, block: Optional[BlockInfo] = None):
        self._block = block

    def update(self, block: BlockInfo) -> None:
        if self._block is not None and block.number < self._block.number:
            logger.debug(f"Ignoring stale block {block.number} (have {self._block.number})")
            return
        self._block = block

    def current(self) -> Optional[BlockInfo]:
        return self._block
