"""
Stage retry policies.

A RetryPolicy is plain data (attempt cap, exponential backoff with
jitter, retryable predicate); run_with_policy is the generic executor
that applies one to an async callable using tenacity.

Dependencies: tenacity
System role: Retry mechanics for pipeline stages
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from spacerag.core.document_processing.configs import StageRetrySettings
from spacerag.core.exceptions import SpaceRAGException, StageError

logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    """
    Default retry predicate.

    Stage errors carry their own classification; other application
    errors (not found, invalid transition) are permanent; anything else
    (driver, network, provider exceptions) is treated as transient.
    """
    if isinstance(exc, StageError):
        return exc.retryable
    if isinstance(exc, SpaceRAGException):
        return False
    return isinstance(exc, Exception)


@dataclass(frozen=True)
class RetryPolicy:
    """Per-stage retry configuration."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    factor: float = 2.0
    jitter: float = 1.0
    retryable: Callable[[BaseException], bool] = field(default=is_retryable, compare=False)

    @classmethod
    def from_settings(cls, settings: StageRetrySettings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_delay,
            max_delay=settings.max_delay,
            factor=settings.factor,
            jitter=settings.jitter,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        return cls(max_attempts=1, base_delay=0.0, max_delay=0.0, jitter=0.0)

    def backoff(self):
        """tenacity wait strategy: base * factor^(n-1) + U(0, jitter), capped at max_delay."""
        return wait_exponential_jitter(
            initial=self.base_delay,
            max=self.max_delay,
            exp_base=self.factor,
            jitter=self.jitter,
        )


@dataclass
class PolicyOutcome:
    """Return value and attempt count of a successful policy run."""

    value: Any
    attempts: int


async def run_with_policy(
    fn: Callable[[], Awaitable[Any]],
    policy: RetryPolicy,
    name: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PolicyOutcome:
    """
    Run an async callable under a retry policy.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        policy: Retry policy to apply
        name: Label for log records
        sleep: Sleep function used between attempts

    Returns:
        PolicyOutcome: Result and number of attempts used

    Raises:
        Exception: The last error once the policy gives up or the error is permanent
    """

    def _before_sleep(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            f"{__name__}:run_with_policy - {name} attempt {state.attempt_number}/"
            f"{policy.max_attempts} failed, retrying in {state.next_action.sleep if state.next_action else 0:.2f}s",
            extra={
                "task": name,
                "attempt": state.attempt_number,
                "error_type": type(exc).__name__ if exc else None,
                "error_msg": str(exc) if exc else None,
            },
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.backoff(),
        retry=retry_if_exception(policy.retryable),
        before_sleep=_before_sleep,
        sleep=sleep,
        reraise=True,
    )

    attempts = 0
    value = None
    async for attempt in retrying:
        with attempt:
            attempts = attempt.retry_state.attempt_number
            value = await fn()
    return PolicyOutcome(value=value, attempts=attempts)
