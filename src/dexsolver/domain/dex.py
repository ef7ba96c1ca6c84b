"""Provider-agnostic swap vocabulary.

An ``Order`` plus a ``Slippage`` tolerance goes into a provider; a ``Swap``
ready for on-chain execution comes out.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from dexsolver.domain.eth import Amount, Asset, ContractAddress, Gas, TokenAddress

BPS_DENOMINATOR = 10_000


class Side(str, Enum):
    """Which side of the order ``amount`` refers to."""

    SELL = "sell"
    BUY = "buy"


@dataclass(frozen=True)
class Order:
    """A request to trade ``sell`` for ``buy``.

    For ``Side.SELL`` the amount is what is sold, for ``Side.BUY`` it is
    what must be bought.
    """

    sell: TokenAddress
    buy: TokenAddress
    side: Side
    amount: Amount

    def __post_init__(self):
        object.__setattr__(self, "amount", Amount(self.amount))


@dataclass(frozen=True)
class Slippage:
    """Slippage tolerance in basis points (50 = 0.5%)."""

    bps: int

    def __post_init__(self):
        if self.bps < 0:
            raise ValueError(f"slippage cannot be negative: {self.bps} bps")

    @classmethod
    def zero(cls) -> "Slippage":
        return cls(0)

    @classmethod
    def from_percent(cls, percent: Decimal) -> "Slippage":
        """Build from a percentage, e.g. ``Decimal("0.5")`` for 50 bps."""
        return cls(int(Decimal(percent) * 100))

    def as_bps(self) -> int:
        return self.bps

    def as_percent(self) -> Decimal:
        return Decimal(self.bps) / Decimal(100)

    def as_factor(self) -> Decimal:
        return Decimal(self.bps) / Decimal(BPS_DENOMINATOR)

    def _delta(self, amount: Amount) -> int:
        return int(amount) * self.bps // BPS_DENOMINATOR

    def add(self, amount: Amount) -> Amount:
        """Loosen an upper bound: the most we are willing to pay."""
        return Amount(amount) + self._delta(amount)

    def sub(self, amount: Amount) -> Amount:
        """Tighten a lower bound: the least we are willing to receive.

        Saturates at zero for tolerances of 100% or more.
        """
        return Amount(amount).saturating_sub(self._delta(amount))


@dataclass(frozen=True)
class Call:
    """A single contract invocation."""

    to: ContractAddress
    calldata: bytes


@dataclass(frozen=True)
class Allowance:
    """ERC20 approval the caller must grant before executing the calls."""

    spender: ContractAddress
    amount: Amount


@dataclass
class Swap:
    """An executable swap produced fresh for every quote request."""

    calls: list[Call]
    input: Asset
    output: Asset
    allowance: Allowance
    gas: Gas
    provider: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.calls:
            raise ValueError("a swap needs at least one call")
