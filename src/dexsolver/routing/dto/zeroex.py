"""Wire models for the 0x swap API.

API docs: https://0x.org/docs/api#tag/Swap/operation/swap::allowanceHolder::getQuote
"""

from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from dexsolver.domain.dex import Order, Slippage
from dexsolver.domain.eth import to_address
from dexsolver.routing.dto.common import HexBytes


class Query(BaseModel):
    """Query parameters of ``GET quote``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chain_id: int
    sell_token: str = ""
    buy_token: str = ""
    sell_amount: int = 0
    taker: str
    slippage_bps: Optional[int] = None
    excluded_sources: list[str] = Field(default_factory=list)

    @field_serializer("excluded_sources")
    def _comma_separated(self, sources: list[str]) -> Optional[str]:
        return ",".join(sources) if sources else None

    def with_domain(self, order: Order, slippage: Slippage) -> "Query":
        """Fill in the order specific fields, keeping the configured ones."""
        return self.model_copy(
            update={
                "sell_token": str(order.sell),
                "buy_token": str(order.buy),
                "sell_amount": int(order.amount),
                "slippage_bps": slippage.as_bps(),
            }
        )

    def to_params(self) -> dict:
        params = self.model_dump(by_alias=True)
        return {key: value for key, value in params.items() if value is not None}


class Transaction(BaseModel):
    to: str
    data: HexBytes
    gas: int

    @field_validator("to")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return to_address(value)


class Quote(BaseModel):
    """Successful quote body.

    Without liquidity 0x answers 200 with little more than
    ``liquidityAvailable: false``; otherwise the transaction and both
    amounts must be present.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    liquidity_available: bool = True
    transaction: Optional[Transaction] = None
    sell_amount: Optional[int] = None
    buy_amount: Optional[int] = None

    @model_validator(mode="after")
    def _complete_when_liquid(self) -> "Quote":
        if self.liquidity_available:
            missing = [
                name
                for name in ("transaction", "sell_amount", "buy_amount")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"quote with liquidity is missing {', '.join(missing)}")
        return self


class Error(BaseModel):
    """Error envelope returned on non-2xx responses."""

    code: int
    reason: str
