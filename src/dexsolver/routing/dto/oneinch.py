"""Wire models for the 1inch swap API (v5.0).

API docs: https://portal.1inch.dev/documentation/apis/swap/classic-swap/introduction
"""

from decimal import Decimal
from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from dexsolver.domain.dex import Order, Side, Slippage
from dexsolver.domain.eth import to_address
from dexsolver.routing.dto.common import HexBytes
from dexsolver.routing.errors import OrderNotSupported

# 1inch refuses anything above 50%
MAX_SLIPPAGE_PERCENT = Decimal(50)


class Query(BaseModel):
    """Query parameters of ``GET swap``.

    The configured defaults are built once at start-up; ``try_with_domain``
    fills in the order for every request.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_token_address: Optional[str] = None
    to_token_address: Optional[str] = None
    amount: Optional[int] = None
    from_address: str
    slippage: Optional[Decimal] = None
    protocols: Optional[list[str]] = None
    referrer_address: Optional[str] = None
    disable_estimate: Optional[bool] = None
    main_route_parts: Optional[int] = None
    connector_tokens: Optional[int] = None
    complexity_level: Optional[int] = None

    @field_serializer("protocols")
    def _comma_separated(self, protocols: Optional[list[str]]) -> Optional[str]:
        return ",".join(protocols) if protocols is not None else None

    @field_serializer("slippage")
    def _plain_decimal(self, slippage: Optional[Decimal]) -> Optional[str]:
        return format(slippage.normalize(), "f") if slippage is not None else None

    def try_with_domain(self, order: Order, slippage: Slippage) -> "Query":
        """Fill in the order, rejecting what 1inch cannot quote.

        Raises:
            OrderNotSupported: for buy orders or out of range slippage.
        """
        if order.side != Side.SELL:
            raise OrderNotSupported("1inch only supports sell orders")
        percent = slippage.as_percent()
        if percent > MAX_SLIPPAGE_PERCENT:
            raise OrderNotSupported(f"slippage {percent}% exceeds {MAX_SLIPPAGE_PERCENT}%")

        return self.model_copy(
            update={
                "from_token_address": str(order.sell),
                "to_token_address": str(order.buy),
                "amount": int(order.amount),
                "slippage": percent,
            }
        )

    def to_params(self) -> dict:
        params = self.model_dump(by_alias=True)
        return {key: value for key, value in params.items() if value is not None}


class Transaction(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    to: str
    data: HexBytes
    gas: int
    value: Optional[int] = None
    gas_price: Optional[int] = None

    @field_validator("to")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return to_address(value)


class Swap(BaseModel):
    """Successful ``GET swap`` body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_token_amount: int
    to_token_amount: int
    tx: Transaction


class Protocol(BaseModel):
    id: str
    title: Optional[str] = None
    img: Optional[str] = None


class Liquidity(BaseModel):
    """``GET liquidity-sources`` body."""

    protocols: list[Protocol] = Field(default_factory=list)


class Spender(BaseModel):
    """``GET approve/spender`` body."""

    address: str

    @field_validator("address")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return to_address(value)


class Error(BaseModel):
    """Error envelope returned on non-2xx responses."""

    status_code: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("statusCode", "code")
    )
    description: str = ""
    error: Optional[str] = None
