"""Injectable retry strategy for individual transfers.

The default policy makes a single attempt. Deployments that want hardening
pass a policy with more attempts; the pipeline itself never changes.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from common.logging import get_logger

from .errors import NetworkError

LOGGER = get_logger(__name__)

R = TypeVar("R")


class RetryPolicy:
    """Exponential-backoff retry on transport failures."""

    def __init__(
        self,
        attempts: int = 1,
        wait_min: float = 1.0,
        wait_max: float = 10.0,
        retry_on: Tuple[Type[BaseException], ...] = (NetworkError,),
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self.attempts = attempts
        self.wait_min = wait_min
        self.wait_max = wait_max
        self.retry_on = retry_on

    def _log_retry(self, state) -> None:
        LOGGER.warning(
            "Retrying transfer step",
            attempt=state.attempt_number,
            max_attempts=self.attempts,
            error=str(state.outcome.exception()) if state.outcome else None,
        )

    async def call(self, fn: Callable[..., Awaitable[R]], *args, **kwargs) -> R:
        if self.attempts == 1:
            return await fn(*args, **kwargs)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=self.wait_min, max=self.wait_max),
            retry=retry_if_exception_type(self.retry_on),
            before_sleep=self._log_retry,
            reraise=True,
        ):
            with attempt:
                return await fn(*args, **kwargs)
        raise AssertionError("unreachable")  # pragma: no cover


NO_RETRY = RetryPolicy(attempts=1)

__all__ = ["NO_RETRY", "RetryPolicy"]
