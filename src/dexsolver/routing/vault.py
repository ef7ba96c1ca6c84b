"""Balancer V2 Vault ``batchSwap`` call encoding."""

import logging
from dataclasses import dataclass
from enum import IntEnum

from eth_abi import encode
from web3 import Web3

from dexsolver.domain.dex import Call
from dexsolver.domain.eth import I256_MAX, ContractAddress

logger = logging.getLogger(__name__)

BATCH_SWAP_SIGNATURE = (
    "batchSwap(uint8,(bytes32,uint256,uint256,uint256,bytes)[],address[],"
    "(address,bool,address,bool),int256[],uint256)"
)
BATCH_SWAP_SELECTOR = Web3.keccak(text=BATCH_SWAP_SIGNATURE)[:4]

BATCH_SWAP_TYPES = [
    "uint8",
    "(bytes32,uint256,uint256,uint256,bytes)[]",
    "address[]",
    "(address,bool,address,bool)",
    "int256[]",
    "uint256",
]

# Large enough to never expire, mostly zero bytes for cheaper calldata.
# The settlement bounds execution time on its own.
MAX_DEADLINE = 1 << 255


class SwapKind(IntEnum):
    GIVEN_IN = 0
    GIVEN_OUT = 1


@dataclass(frozen=True)
class BatchSwapStep:
    pool_id: bytes
    asset_in_index: int
    asset_out_index: int
    amount: int
    user_data: bytes

    def as_tuple(self) -> tuple:
        return (
            self.pool_id,
            self.asset_in_index,
            self.asset_out_index,
            self.amount,
            self.user_data,
        )


@dataclass(frozen=True)
class FundManagement:
    sender: ContractAddress
    recipient: ContractAddress
    from_internal_balance: bool = False
    to_internal_balance: bool = False

    def as_tuple(self) -> tuple:
        return (
            str(self.sender),
            self.from_internal_balance,
            str(self.recipient),
            self.to_internal_balance,
        )


def to_i256(value: int) -> int:
    """Convert an unsigned amount to ``int256``, or 0 if it does not fit.

    A zero limit drops the slippage protection on that leg; callers accept
    this instead of failing the whole quote.
    """
    if value > I256_MAX:
        logger.warning(f"Swap limit {value} does not fit int256; using 0")
        return 0
    return value


def swap_limits(
    assets: list[str],
    sell_token: str,
    buy_token: str,
    max_input: int,
    min_output: int,
) -> list[int]:
    """Per-asset limits for ``batchSwap``.

    The sell token may flow in up to ``max_input`` (positive), the buy
    token must flow out at least ``min_output`` (negative), intermediate
    tokens must net out to zero.
    """
    limits = []
    for asset in assets:
        if asset == sell_token:
            limits.append(to_i256(max_input))
        elif asset == buy_token:
            limits.append(-to_i256(min_output))
        else:
            limits.append(0)
    return limits


class Vault:
    """The Balancer V2 Vault contract."""

    def __init__(self, address: ContractAddress):
        self._address = address

    @property
    def address(self) -> ContractAddress:
        return self._address

    def batch_swap(
        self,
        kind: SwapKind,
        swaps: list[BatchSwapStep],
        assets: list[str],
        funds: FundManagement,
        limits: list[int],
        deadline: int,
    ) -> Call:
        """Encode a ``batchSwap`` call against this vault."""
        arguments = encode(
            BATCH_SWAP_TYPES,
            [
                int(kind),
                [swap.as_tuple() for swap in swaps],
                list(assets),
                funds.as_tuple(),
                list(limits),
                deadline,
            ],
        )
        return Call(to=self._address, calldata=bytes(BATCH_SWAP_SELECTOR) + arguments)
