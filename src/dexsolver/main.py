"""Command line entry point: quote one order against one provider.

Usage:
    dexsolver zeroex 0xSELL 0xBUY 1000000000000000000 [--side sell] [--slippage-bps 50]
    dexsolver balancer 0xSELL 0xBUY 1000000 --side buy --decimals 0xBUY=6
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from dexsolver.config import get_settings
from dexsolver.domain import Amount, Order, Side, Slippage, Swap, Token, TokenAddress, Tokens
from dexsolver.logs import configure_logging
from dexsolver.routing import DexError, create_dex
from dexsolver.routing.factory import PROVIDERS

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dexsolver", description=__doc__.splitlines()[0])
    parser.add_argument("provider", choices=PROVIDERS)
    parser.add_argument("sell", help="Token to sell")
    parser.add_argument("buy", help="Token to buy")
    parser.add_argument("amount", type=int, help="Amount in atoms")
    parser.add_argument("--side", choices=[side.value for side in Side], default=Side.SELL.value)
    parser.add_argument("--slippage-bps", type=int, default=50)
    parser.add_argument(
        "--decimals",
        action="append",
        default=[],
        metavar="TOKEN=DECIMALS",
        help="Token decimals, needed by Balancer (repeatable)",
    )
    return parser.parse_args(argv)


def parse_tokens(entries: list[str]) -> Tokens:
    tokens = {}
    for entry in entries:
        address, _, decimals = entry.partition("=")
        tokens[TokenAddress(address)] = Token(decimals=int(decimals))
    return Tokens(tokens)


def swap_to_dict(swap: Swap) -> dict:
    return {
        "provider": swap.provider,
        "calls": [{"to": str(call.to), "calldata": "0x" + call.calldata.hex()} for call in swap.calls],
        "input": {"token": str(swap.input.token), "amount": str(swap.input.amount)},
        "output": {"token": str(swap.output.token), "amount": str(swap.output.amount)},
        "allowance": {
            "spender": str(swap.allowance.spender),
            "amount": str(swap.allowance.amount),
        },
        "gas": int(swap.gas),
    }


async def quote(args: argparse.Namespace) -> int:
    settings = get_settings()
    order = Order(
        sell=TokenAddress(args.sell),
        buy=TokenAddress(args.buy),
        side=Side(args.side),
        amount=Amount(args.amount),
    )
    try:
        dex = await create_dex(args.provider, settings)
    except DexError as e:
        logger.error(f"Cannot use {args.provider}: {e}")
        return 1

    try:
        swap = await dex.swap(order, Slippage(args.slippage_bps), parse_tokens(args.decimals))
    except DexError as e:
        logger.error(f"No swap: {type(e).__name__}: {e}")
        return 1
    finally:
        await dex.aclose()

    print(json.dumps(swap_to_dict(swap), indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(get_settings().debug)
    return asyncio.run(quote(args))


if __name__ == "__main__":
    sys.exit(main())
