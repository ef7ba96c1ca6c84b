"""Bounded retry loop for one-time provider setup.

Providers such as 1inch need a couple of metadata lookups before they can
quote anything. ``Bootstrap`` retries that setup on a fixed delay and gives
up for good once a deadline passes:

    INITIALIZING --success--> READY
    INITIALIZING --deadline--> FATAL
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from dexsolver.routing.errors import BootstrapTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

INIT_TIMEOUT_SECONDS = 10.0
RETRY_DELAY_SECONDS = 1.0


class BootstrapState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    FATAL = "fatal"


class Bootstrap(Generic[T]):
    """Runs ``attempt`` until it succeeds or ``timeout`` elapses.

    The deadline runs from construction, not from the first ``run``
    call. ``clock`` and ``sleep`` are injectable so the deadline can be
    tested without waiting for it.
    """

    def __init__(
        self,
        attempt: Callable[[], Awaitable[T]],
        name: str = "provider",
        timeout: float = INIT_TIMEOUT_SECONDS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.name = name
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.state = BootstrapState.INITIALIZING
        self.attempts = 0
        self.last_error: Optional[Exception] = None
        self._attempt = attempt
        self._clock = clock
        self._sleep = sleep
        self._started = clock()
        self._value: Optional[T] = None

    @property
    def deadline(self) -> float:
        return self._started + self.timeout

    @property
    def value(self) -> T:
        if self.state != BootstrapState.READY:
            raise RuntimeError(f"{self.name} is not ready ({self.state.value})")
        return self._value

    async def step(self) -> BootstrapState:
        """Make one attempt and return the resulting state."""
        if self.state != BootstrapState.INITIALIZING:
            return self.state

        self.attempts += 1
        try:
            self._value = await self._attempt()
        except Exception as e:
            self.last_error = e
            if self._clock() > self.deadline:
                logger.error(
                    f"Could not initialize {self.name} after {self.attempts} attempts: {e}"
                )
                self.state = BootstrapState.FATAL
            else:
                logger.warning(f"Failed to initialize {self.name}; trying again: {e}")
            return self.state

        logger.info(f"Initialized {self.name} after {self.attempts} attempt(s)")
        self.state = BootstrapState.READY
        return self.state

    async def run(self) -> T:
        """Drive the state machine to completion.

        Raises:
            BootstrapTimeout: when the deadline passes without a success.
        """
        while True:
            state = await self.step()
            if state == BootstrapState.READY:
                return self._value
            if state == BootstrapState.FATAL:
                raise BootstrapTimeout(
                    f"could not initialize {self.name} in time"
                ) from self.last_error
            await self._sleep(self.retry_delay)
