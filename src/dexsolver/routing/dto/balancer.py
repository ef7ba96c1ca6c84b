"""Wire models for the Balancer Smart Order Router GraphQL API."""

from decimal import Decimal, localcontext
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from dexsolver.domain.auction import Tokens
from dexsolver.domain.dex import Order, Side, Slippage
from dexsolver.domain.eth import ChainId, ContractAddress, to_address
from dexsolver.routing.dto.common import HexBytes
from dexsolver.routing.errors import MissingDecimals, UnsupportedChainId

QUERY = """
query sorGetSwapPaths(
  $callDataInput: GqlSwapCallDataInput!,
  $chain: GqlChain!,
  $queryBatchSwap: Boolean!,
  $swapAmount: AmountHumanReadable!,
  $swapType: GqlSorSwapType!,
  $tokenIn: String!,
  $tokenOut: String!,
  $useProtocolVersion: Int
) {
  sorGetSwapPaths(
    callDataInput: $callDataInput,
    chain: $chain,
    queryBatchSwap: $queryBatchSwap,
    swapAmount: $swapAmount,
    swapType: $swapType,
    tokenIn: $tokenIn,
    tokenOut: $tokenOut,
    useProtocolVersion: $useProtocolVersion
  ) {
    tokenAddresses
    swaps {
      poolId
      assetInIndex
      assetOutIndex
      amount
      userData
    }
    tokenIn
    tokenOut
    swapAmountRaw
    returnAmountRaw
  }
}
"""

# GraphQL enum names of the chains the SOR serves
CHAINS = {
    ChainId.MAINNET: "MAINNET",
    ChainId.OPTIMISM: "OPTIMISM",
    ChainId.GNOSIS: "GNOSIS",
    ChainId.POLYGON: "POLYGON",
    ChainId.BASE: "BASE",
    ChainId.ARBITRUM_ONE: "ARBITRUM",
    ChainId.AVALANCHE: "AVALANCHE",
    ChainId.SEPOLIA: "SEPOLIA",
}

# Only the V2 vault is supported for settlement
PROTOCOL_VERSION = 2


def chain_from_domain(chain_id: ChainId) -> str:
    """Map a chain id to the SOR's chain name.

    Raises:
        UnsupportedChainId: if the SOR does not serve the chain.
    """
    try:
        return CHAINS[chain_id]
    except KeyError:
        raise UnsupportedChainId(chain_id) from None


def _camel_model() -> ConfigDict:
    return ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CallDataInput(BaseModel):
    model_config = _camel_model()

    receiver: str
    sender: str
    slippage_percentage: str
    deadline: Optional[int] = None


class Variables(BaseModel):
    model_config = _camel_model()

    call_data_input: CallDataInput
    chain: str
    query_batch_swap: bool
    swap_amount: str
    swap_type: str
    token_in: str
    token_out: str
    use_protocol_version: int = PROTOCOL_VERSION


class Query(BaseModel):
    """The POST body sent to the SOR endpoint."""

    query: str = QUERY
    variables: Variables

    @classmethod
    def from_domain(
        cls,
        order: Order,
        tokens: Tokens,
        slippage: Slippage,
        chain: str,
        settlement: ContractAddress,
        query_batch_swap: bool,
        deadline: Optional[int],
    ) -> "Query":
        """Build the query for an order.

        The SOR takes the swap amount in human units, so the decimals of
        the token the amount is denominated in must be known.

        Raises:
            MissingDecimals: if that token has no decimals in ``tokens``.
        """
        token = order.sell if order.side == Side.SELL else order.buy
        decimals = tokens.decimals(token)
        if decimals is None:
            raise MissingDecimals(token)

        return cls(
            variables=Variables(
                call_data_input=CallDataInput(
                    receiver=str(settlement),
                    sender=str(settlement),
                    slippage_percentage=format(slippage.as_percent().normalize(), "f"),
                    deadline=deadline,
                ),
                chain=chain,
                query_batch_swap=query_batch_swap,
                swap_amount=to_human_readable(int(order.amount), decimals),
                swap_type="EXACT_IN" if order.side == Side.SELL else "EXACT_OUT",
                token_in=str(order.sell),
                token_out=str(order.buy),
            )
        )

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def to_human_readable(amount: int, decimals: int) -> str:
    """Render ``amount`` atoms as an exact decimal string."""
    if not amount:
        return "0"
    with localcontext() as ctx:
        # wide enough for any uint256 without rounding
        ctx.prec = 100
        return format(Decimal(amount).scaleb(-decimals).normalize(), "f")


class Swap(BaseModel):
    """One pool hop of a batch swap."""

    model_config = _camel_model()

    pool_id: HexBytes
    asset_in_index: int
    asset_out_index: int
    amount: int
    user_data: HexBytes


class Quote(BaseModel):
    """The ``sorGetSwapPaths`` result."""

    model_config = _camel_model()

    token_addresses: list[str] = Field(default_factory=list)
    swaps: list[Swap] = Field(default_factory=list)
    token_in: Optional[str] = None
    token_out: Optional[str] = None
    swap_amount_raw: int
    return_amount_raw: int

    @field_validator("token_addresses")
    @classmethod
    def _checksum_all(cls, values: list[str]) -> list[str]:
        return [to_address(value) for value in values]

    def is_empty(self) -> bool:
        return not self.swaps


class Data(BaseModel):
    model_config = _camel_model()

    sor_get_swap_paths: Quote


class GetSwapPathsResponse(BaseModel):
    data: Data
