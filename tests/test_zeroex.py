"""Tests for the 0x provider."""

import httpx
import pytest

from dexsolver.domain import Amount, ContractAddress, Order, Side, Slippage
from dexsolver.routing import errors
from dexsolver.routing.zeroex import ZeroEx, ZeroExConfig
from dexsolver.utils import http

EXCHANGE = "0x" + "de" * 20

QUOTE = {
    "liquidityAvailable": True,
    "sellAmount": "1000",
    "buyAmount": "2000",
    "transaction": {
        "to": EXCHANGE,
        "data": "0xabcdef01",
        "gas": "210000",
        "gasPrice": "1000000000",
        "value": "0",
    },
}


@pytest.fixture
def config(settlement):
    return ZeroExConfig(
        api_key="test-key",
        settlement=settlement,
        excluded_sources=["Uniswap_V2", "Curve"],
    )


@pytest.fixture
def sell_order(token_a, token_b):
    return Order(sell=token_a, buy=token_b, side=Side.SELL, amount=Amount(1000))


class TestZeroExSwap:
    """Tests for quoting through 0x."""

    @pytest.mark.asyncio
    async def test_sell_order(self, recorder, config, sell_order, token_a, token_b):
        """Test a quote becomes a swap with slippage applied to the output."""
        api = recorder(lambda request: httpx.Response(200, json=QUOTE))
        zeroex = ZeroEx(config, transport=api.transport)

        swap = await zeroex.swap(sell_order, Slippage(50))

        assert len(swap.calls) == 1
        assert swap.calls[0].to == ContractAddress(EXCHANGE)
        assert swap.calls[0].calldata == bytes.fromhex("abcdef01")
        assert swap.input.token == token_a
        assert swap.input.amount == 1000
        assert swap.output.token == token_b
        assert swap.output.amount == 1990
        assert swap.allowance.spender == ContractAddress(EXCHANGE)
        assert swap.allowance.amount == 1000
        assert int(swap.gas) == 210000
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_request(self, recorder, config, sell_order, settlement):
        """Test the query parameters and headers sent to 0x."""
        api = recorder(lambda request: httpx.Response(200, json=QUOTE))
        zeroex = ZeroEx(config, transport=api.transport)

        await zeroex.swap(sell_order, Slippage(50))

        request = api.last
        params = request.url.params
        assert request.method == "GET"
        assert request.url.path == "/swap/allowance-holder/quote"
        assert request.headers["0x-api-key"] == "test-key"
        assert request.headers["0x-version"] == "v2"
        assert params["chainId"] == "1"
        assert params["sellToken"] == str(sell_order.sell)
        assert params["buyToken"] == str(sell_order.buy)
        assert params["sellAmount"] == "1000"
        assert params["taker"] == str(settlement)
        assert params["slippageBps"] == "50"
        assert params["excludedSources"] == "Uniswap_V2,Curve"
        assert set(params.keys()) == {
            "chainId",
            "sellToken",
            "buyToken",
            "sellAmount",
            "taker",
            "slippageBps",
            "excludedSources",
        }
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_no_excluded_sources(self, recorder, settlement, sell_order):
        """Test the parameter is omitted when nothing is excluded."""
        api = recorder(lambda request: httpx.Response(200, json=QUOTE))
        zeroex = ZeroEx(ZeroExConfig(api_key="k", settlement=settlement), transport=api.transport)

        await zeroex.swap(sell_order, Slippage(50))

        assert "excludedSources" not in api.last.url.params
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_buy_order_is_quoted(self, recorder, config, token_a, token_b):
        """Test buy orders are still sent, with the amount as sellAmount."""
        api = recorder(lambda request: httpx.Response(200, json=QUOTE))
        zeroex = ZeroEx(config, transport=api.transport)
        order = Order(sell=token_a, buy=token_b, side=Side.BUY, amount=Amount(1000))

        swap = await zeroex.swap(order, Slippage(50))

        assert len(api.requests) == 1
        assert api.last.url.params["sellAmount"] == "1000"
        assert "buyAmount" not in api.last.url.params
        assert swap.input.token == token_a
        assert swap.output.token == token_b
        assert swap.output.amount == 1990
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_no_liquidity(self, recorder, config, sell_order):
        """Test an answer without liquidity means no route."""
        api = recorder(
            lambda request: httpx.Response(200, json={"liquidityAvailable": False, "zid": "0x1"})
        )
        zeroex = ZeroEx(config, transport=api.transport)

        with pytest.raises(errors.NotFound) as exc_info:
            await zeroex.swap(sell_order, Slippage(50))

        assert exc_info.value.recoverable
        await zeroex.aclose()


class TestZeroExErrors:
    """Tests for mapping 0x failures."""

    @pytest.mark.asyncio
    async def test_rate_limited(self, recorder, config, sell_order):
        """Test 429 maps to RateLimited."""
        api = recorder(lambda request: httpx.Response(429, text="Too Many Requests"))
        zeroex = ZeroEx(config, transport=api.transport)

        with pytest.raises(errors.RateLimited):
            await zeroex.swap(sell_order, Slippage(50))
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_api_error(self, recorder, config, sell_order):
        """Test a parsed error body keeps its code and reason."""
        api = recorder(
            lambda request: httpx.Response(400, json={"code": 100, "reason": "Validation Failed"})
        )
        zeroex = ZeroEx(config, transport=api.transport)

        with pytest.raises(errors.HttpFailure) as exc_info:
            await zeroex.swap(sell_order, Slippage(50))

        assert exc_info.value.code == 100
        assert exc_info.value.reason == "Validation Failed"
        assert not exc_info.value.recoverable
        await zeroex.aclose()

    @pytest.mark.asyncio
    async def test_server_error(self, recorder, config, sell_order):
        """Test unparseable failures keep the HTTP error."""
        api = recorder(lambda request: httpx.Response(500, text="oops"))
        zeroex = ZeroEx(config, transport=api.transport)

        with pytest.raises(errors.HttpFailure) as exc_info:
            await zeroex.swap(sell_order, Slippage(50))

        assert exc_info.value.error is not None
        assert exc_info.value.error.status_code == 500
        await zeroex.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"transaction": QUOTE["transaction"]},
            {"liquidityAvailable": True, "sellAmount": "1000", "buyAmount": "2000"},
            {"transaction": QUOTE["transaction"], "sellAmount": "1000"},
        ],
    )
    async def test_incomplete_quote(self, recorder, config, sell_order, body):
        """Test a liquid quote missing its transaction or amounts is rejected."""
        api = recorder(lambda request: httpx.Response(200, json=body))
        zeroex = ZeroEx(config, transport=api.transport)

        with pytest.raises(errors.HttpFailure) as exc_info:
            await zeroex.swap(sell_order, Slippage(50))

        assert isinstance(exc_info.value.error, http.DecodeError)
        await zeroex.aclose()
