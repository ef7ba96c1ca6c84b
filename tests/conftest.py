"""Pytest configuration and fixtures."""

import json
import os
from typing import Callable

import httpx
import pytest

# Set test environment
os.environ["DEBUG"] = "true"

from dexsolver.domain import ContractAddress, TokenAddress

TOKEN_A = "0x" + "a1" * 20
TOKEN_B = "0x" + "b2" * 20
TOKEN_C = "0x" + "c3" * 20
SETTLEMENT = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"


class Recorder:
    """Fake upstream API: answers with ``handler`` and keeps every request."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    """Build a Recorder around a handler function."""
    return Recorder


@pytest.fixture
def token_a() -> TokenAddress:
    return TokenAddress(TOKEN_A)


@pytest.fixture
def token_b() -> TokenAddress:
    return TokenAddress(TOKEN_B)


@pytest.fixture
def token_c() -> TokenAddress:
    return TokenAddress(TOKEN_C)


@pytest.fixture
def settlement() -> ContractAddress:
    return ContractAddress(SETTLEMENT)
