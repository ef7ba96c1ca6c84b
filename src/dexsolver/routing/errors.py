"""Error taxonomy shared by every swap provider."""

from typing import Optional

from dexsolver.domain.eth import ChainId, TokenAddress
from dexsolver.utils.http import HttpError


class DexError(Exception):
    """Base class for provider failures.

    Attributes:
        recoverable: Whether the caller may try again later or elsewhere.
    """

    recoverable = False


class NotFound(DexError):
    """No viable route for the order."""

    recoverable = True

    def __init__(self, message: str = "no valid swap could be found"):
        super().__init__(message)


class RateLimited(DexError):
    """Upstream answered 429; back off before asking again."""

    recoverable = True

    def __init__(self, message: str = "rate limited"):
        super().__init__(message)


class OrderNotSupported(DexError):
    """The provider cannot quote this kind of order."""

    def __init__(self, message: str = "order type is not supported"):
        super().__init__(message)


class HttpFailure(DexError):
    """Transport failure or unexpected status from the provider.

    ``code`` and ``reason`` are filled when the provider returned a
    parseable error body that has no more specific meaning.
    """

    def __init__(
        self,
        error: Optional[HttpError] = None,
        code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.error = error
        self.code = code
        self.reason = reason
        if error is not None:
            message = str(error)
        else:
            message = f"api error {code}: {reason}"
        super().__init__(message)


class ApiError(DexError):
    """Provider error code passed through as-is."""

    def __init__(self, code: int, description: str):
        self.code = code
        self.description = description
        super().__init__(f"api error {code}: {description}")


class UnsupportedChainId(DexError):
    def __init__(self, chain_id: ChainId):
        self.chain_id = chain_id
        super().__init__(f"unsupported chain: {chain_id!r}")


class MissingDecimals(DexError):
    def __init__(self, token: TokenAddress):
        self.token = token
        super().__init__(f"decimals are missing for the swapped token: {token}")


class BootstrapTimeout(RuntimeError):
    """A provider could not be initialized in time; it is unusable."""
