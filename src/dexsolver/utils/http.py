"""Typed HTTP round trips against upstream swap APIs.

Every provider talks to its API through ``roundtrip``: the success body is
validated into a pydantic model, and failures come back as a
``RoundtripError`` holding either a transport/status problem or the
provider's own parsed error body. Nothing here retries.
"""

import itertools
import logging
from typing import Any, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from dexsolver.domain.auction import CurrentBlockWatcher

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
E = TypeVar("E", bound=BaseModel)

RATE_LIMITED = 429
BLOCK_HASH_HEADER = "X-Current-Block-Hash"


class HttpError(Exception):
    """Transport-level failure talking to an upstream API."""


class StatusError(HttpError):
    """Non-2xx response whose body could not be parsed as an API error."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body[:500]}")


class TransportError(HttpError):
    """The request never produced a response (DNS, TLS, timeouts, ...)."""


class DecodeError(HttpError):
    """A 2xx response whose body did not match the expected shape."""


class RoundtripError(Exception, Generic[E]):
    """Failed round trip: either ``http`` or ``api`` is set, never both."""

    def __init__(
        self,
        http: Optional[HttpError] = None,
        api: Optional[E] = None,
        status_code: Optional[int] = None,
    ):
        self.http = http
        self.api = api
        self.status_code = status_code
        super().__init__(str(http) if http is not None else f"API error {api!r}")

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == RATE_LIMITED


def join(base: str, path: str) -> str:
    """Join a path onto a base URL, keeping the base's last segment."""
    if not base.endswith("/"):
        base = f"{base}/"
    return f"{base}{path.lstrip('/')}"


class RequestCounter:
    """Monotonic ids used to correlate request and response log lines."""

    def __init__(self):
        self._ids = itertools.count()

    def next(self) -> int:
        return next(self._ids)


class Client:
    """``httpx.AsyncClient`` wrapper shared by one provider.

    When a block watcher is configured, every request carries the hash of
    the latest known block.
    """

    def __init__(
        self,
        headers: Optional[dict[str, str]] = None,
        block_watcher: Optional[CurrentBlockWatcher] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_headers = {"Accept": "application/json"}
        base_headers.update(headers or {})
        self.block_watcher = block_watcher
        self._client = httpx.AsyncClient(
            headers=base_headers,
            timeout=timeout,
            transport=transport,
        )

    def build_request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Request:
        headers = {}
        if self.block_watcher is not None:
            block = self.block_watcher.current()
            if block is not None:
                headers[BLOCK_HASH_HEADER] = block.hash
        return self._client.build_request(method, url, params=params, json=json, headers=headers)

    async def send(self, request: httpx.Request) -> httpx.Response:
        return await self._client.send(request)

    async def aclose(self) -> None:
        await self._client.aclose()


async def roundtrip(
    client: Client,
    request: httpx.Request,
    success: type[T],
    error: Optional[type[E]] = None,
) -> T:
    """Send ``request`` and parse the response.

    Raises:
        RoundtripError: with ``api`` set when a non-2xx body parses as
            ``error``, with ``http`` set for every other failure.
    """
    try:
        response = await client.send(request)
    except httpx.HTTPError as e:
        raise RoundtripError(http=TransportError(f"{type(e).__name__}: {e}")) from e

    body = response.text
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")

    if response.is_success:
        try:
            return success.model_validate_json(body)
        except ValidationError as e:
            raise RoundtripError(
                http=DecodeError(f"unexpected response body: {e}"),
                status_code=response.status_code,
            ) from e

    if error is not None:
        try:
            api_error = error.model_validate_json(body)
        except ValidationError:
            pass
        else:
            raise RoundtripError(api=api_error, status_code=response.status_code)

    raise RoundtripError(
        http=StatusError(response.status_code, body),
        status_code=response.status_code,
    )
