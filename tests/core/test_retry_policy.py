"""
Tests for RetryPolicy and run_with_policy.

Transient failures are retried up to the attempt cap with bounded
backoff; permanent failures surface after a single attempt.
"""

import pytest

from spacerag.core.document_processing.configs import StageRetrySettings
from spacerag.core.document_processing.retry_policy import (
    RetryPolicy,
    is_retryable,
    run_with_policy,
)
from spacerag.core.exceptions import (
    EmbeddingProviderError,
    MissingInputError,
    NotFoundError,
    ParserUnavailableError,
    UnsupportedFormatError,
)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FlakyCall:
    """Raises the queued errors in order, then returns `value`."""

    def __init__(self, errors: list[Exception], value: str = "done") -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class TestIsRetryable:
    @pytest.mark.parametrize(
        "exc",
        [
            ParserUnavailableError("parser down"),
            EmbeddingProviderError("rate limited"),
            ConnectionError("reset by peer"),
            TimeoutError(),
        ],
    )
    def test_transient_errors_are_retryable(self, exc: Exception) -> None:
        assert is_retryable(exc) is True

    @pytest.mark.parametrize(
        "exc",
        [
            UnsupportedFormatError("image/png"),
            MissingInputError("no text"),
            NotFoundError("document", "abc"),
        ],
    )
    def test_permanent_errors_are_not_retryable(self, exc: Exception) -> None:
        assert is_retryable(exc) is False


class TestRunWithPolicy:
    """Test suite for run_with_policy()."""

    async def test_transient_failures_retry_until_success(self) -> None:
        """Two transient failures then success uses three attempts."""
        # Arrange
        call = FlakyCall([ParserUnavailableError("down"), ParserUnavailableError("down")])
        sleep = SleepRecorder()
        policy = RetryPolicy(max_attempts=3, base_delay=1.0, max_delay=10.0, jitter=0.0)

        # Act
        outcome = await run_with_policy(call, policy, name="extract", sleep=sleep)

        # Assert
        assert outcome.value == "done"
        assert outcome.attempts == 3
        assert call.calls == 3
        assert len(sleep.delays) == 2

    async def test_permanent_failure_is_not_retried(self) -> None:
        call = FlakyCall([UnsupportedFormatError("image/png")])
        sleep = SleepRecorder()

        with pytest.raises(UnsupportedFormatError):
            await run_with_policy(call, RetryPolicy(max_attempts=5), name="extract", sleep=sleep)

        assert call.calls == 1
        assert sleep.delays == []

    async def test_exhausted_attempts_reraise_last_error(self) -> None:
        call = FlakyCall([EmbeddingProviderError(f"failure {n}") for n in range(4)])

        with pytest.raises(EmbeddingProviderError, match="failure 2"):
            await run_with_policy(call, RetryPolicy(max_attempts=3), name="embed", sleep=SleepRecorder())

        assert call.calls == 3

    async def test_backoff_grows_and_is_capped(self) -> None:
        """Waits follow base * factor^(n-1) and never exceed max_delay."""
        # Arrange
        call = FlakyCall([ParserUnavailableError("down")] * 4)
        sleep = SleepRecorder()
        policy = RetryPolicy(max_attempts=5, base_delay=1.0, max_delay=3.0, factor=2.0, jitter=0.0)

        # Act
        await run_with_policy(call, policy, name="extract", sleep=sleep)

        # Assert
        assert sleep.delays == [1.0, 2.0, 3.0, 3.0]

    async def test_no_retry_policy_runs_once(self) -> None:
        call = FlakyCall([ConnectionError("reset")])

        with pytest.raises(ConnectionError):
            await run_with_policy(call, RetryPolicy.no_retry(), name="process", sleep=SleepRecorder())

        assert call.calls == 1


class TestRetryPolicyFromSettings:
    def test_copies_stage_settings(self) -> None:
        settings = StageRetrySettings(max_attempts=5, base_delay=2.0, max_delay=120.0, factor=3.0, jitter=0.5)

        policy = RetryPolicy.from_settings(settings)

        assert (policy.max_attempts, policy.base_delay, policy.max_delay) == (5, 2.0, 120.0)
        assert (policy.factor, policy.jitter) == (3.0, 0.5)
