"""Ethereum primitives shared by every swap provider.

Addresses are stored checksummed so that two references to the same
contract compare equal no matter how the upstream API cased them.
"""

from dataclasses import dataclass
from enum import IntEnum

from web3 import Web3

U256_MAX = 2**256 - 1
I256_MAX = 2**255 - 1


class Amount(int):
    """Unsigned 256-bit token amount in atoms.

    Behaves like an ``int`` but refuses to leave the ``uint256`` range:
    constructing or computing a value below zero or above ``U256_MAX``
    raises ``OverflowError`` instead of wrapping.
    """

    def __new__(cls, value=0):
        value = int(value)
        if value < 0 or value > U256_MAX:
            raise OverflowError(f"amount {value} out of uint256 range")
        return super().__new__(cls, value)

    def __add__(self, other):
        return Amount(int(self) + int(other))

    __radd__ = __add__

    def __sub__(self, other):
        return Amount(int(self) - int(other))

    def __rsub__(self, other):
        return Amount(int(other) - int(self))

    def __mul__(self, other):
        return Amount(int(self) * int(other))

    __rmul__ = __mul__

    def __floordiv__(self, other):
        return Amount(int(self) // int(other))

    def saturating_sub(self, other) -> "Amount":
        """Subtract, clamping at zero instead of raising."""
        return Amount(max(int(self) - int(other), 0))

    def __repr__(self) -> str:
        return f"Amount({int(self)})"


def to_address(value: str) -> str:
    """Normalize a hex address to its EIP-55 checksummed form."""
    return Web3.to_checksum_address(value)


@dataclass(frozen=True)
class _Address:
    value: str

    def __post_init__(self):
        object.__setattr__(self, "value", to_address(self.value))

    def __str__(self) -> str:
        return self.value


class TokenAddress(_Address):
    """An ERC20 token contract address."""


class ContractAddress(_Address):
    """Address of a contract that is called or approved."""


@dataclass(frozen=True)
class Asset:
    """A token and an amount of it, one side of a swap."""

    token: TokenAddress
    amount: Amount


@dataclass(frozen=True)
class Gas:
    """Gas units a set of calls is expected to use."""

    value: int

    def __int__(self) -> int:
        return self.value


class ChainId(IntEnum):
    """EVM chain ids the solver knows about."""

    MAINNET = 1
    OPTIMISM = 10
    GOERLI = 5
    GNOSIS = 100
    POLYGON = 137
    BASE = 8453
    ARBITRUM_ONE = 42161
    AVALANCHE = 43114
    SEPOLIA = 11155111
