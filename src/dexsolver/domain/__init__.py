"""Domain types shared by all swap providers."""

from dexsolver.domain.auction import BlockInfo, CurrentBlockWatcher, Token, Tokens
from dexsolver.domain.dex import Allowance, Call, Order, Side, Slippage, Swap
from dexsolver.domain.eth import (
    Amount,
    Asset,
    ChainId,
    ContractAddress,
    Gas,
    TokenAddress,
)

__all__ = [
    # Ethereum primitives
    "Amount",
    "Asset",
    "ChainId",
    "ContractAddress",
    "Gas",
    "TokenAddress",
    # Swap vocabulary
    "Allowance",
    "Call",
    "Order",
    "Side",
    "Slippage",
    "Swap",
    # Auction context
    "BlockInfo",
    "CurrentBlockWatcher",
    "Token",
    "Tokens",
]
