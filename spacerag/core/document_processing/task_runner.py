"""
In-process task runner.

Registered tasks run as independent asyncio units of work, each under
its own RetryPolicy. trigger() schedules a run in the background;
trigger_and_wait() runs it and reports the outcome without raising.
Once a task gives up, its failure hook is invoked exactly once.

Dependencies: asyncio, spacerag.core.document_processing.retry_policy
System role: Background execution for pipeline stages
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from spacerag.core.document_processing.retry_policy import RetryPolicy, run_with_policy
from spacerag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

TaskHandler = Callable[[Any], Awaitable[Any]]
FailureHook = Callable[[Any, BaseException], Awaitable[None]]


@dataclass
class RegisteredTask:
    task_id: str
    handler: TaskHandler
    policy: RetryPolicy
    on_failure: FailureHook | None = None


@dataclass
class TaskRunResult:
    """Outcome of one task run."""

    task_id: str
    ok: bool
    output: Any = None
    error: BaseException | None = None
    attempts: int = 0


class TaskRunner:
    """Registry and executor for retryable async tasks."""

    def __init__(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        """
        Args:
            sleep: Sleep used between retry attempts (swap for a no-op in tests)
        """
        self._tasks: dict[str, RegisteredTask] = {}
        self._background: set[asyncio.Task] = set()
        self._sleep = sleep

    def register(
        self,
        task_id: str,
        handler: TaskHandler,
        policy: RetryPolicy,
        on_failure: FailureHook | None = None,
    ) -> None:
        """
        Register a task.

        Raises:
            ValueError: task_id already registered
        """
        if task_id in self._tasks:
            raise ValueError(f"Task already registered: {task_id}")
        self._tasks[task_id] = RegisteredTask(task_id, handler, policy, on_failure)

    def _get(self, task_id: str) -> RegisteredTask:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise ValueError(f"Unknown task: {task_id}") from None

    async def trigger_and_wait(self, task_id: str, payload: Any) -> TaskRunResult:
        """
        Run a task to completion under its retry policy.

        Failures are returned, not raised; the failure hook has already
        run by the time the result comes back.
        """
        task = self._get(task_id)
        attempts = 0

        async def _attempt() -> Any:
            nonlocal attempts
            attempts += 1
            return await task.handler(payload)

        try:
            outcome = await run_with_policy(_attempt, task.policy, name=task_id, sleep=self._sleep)
        except Exception as exc:
            log_exception_with_context(
                logger,
                f"{__name__}:trigger_and_wait - {task_id} failed after {attempts} attempt(s)",
                exc,
                task=task_id,
                payload=payload,
                attempts=attempts,
            )
            await self._run_failure_hook(task, payload, exc)
            return TaskRunResult(task_id=task_id, ok=False, error=exc, attempts=attempts)

        return TaskRunResult(task_id=task_id, ok=True, output=outcome.value, attempts=outcome.attempts)

    async def _run_failure_hook(self, task: RegisteredTask, payload: Any, exc: BaseException) -> None:
        if task.on_failure is None:
            return
        try:
            await task.on_failure(payload, exc)
        except Exception as hook_exc:
            log_exception_with_context(
                logger,
                f"{__name__}:_run_failure_hook - failure hook for {task.task_id} raised",
                hook_exc,
                task=task.task_id,
                payload=payload,
            )

    def trigger(self, task_id: str, payload: Any) -> asyncio.Task:
        """
        Schedule a task run in the background.

        Returns:
            asyncio.Task: Handle resolving to the TaskRunResult
        """
        self._get(task_id)
        background = asyncio.create_task(
            self.trigger_and_wait(task_id, payload),
            name=f"{task_id}:{payload}",
        )
        self._background.add(background)
        background.add_done_callback(self._background.discard)
        return background

    @property
    def pending(self) -> int:
        return len(self._background)

    async def drain(self) -> None:
        """Wait for every background run scheduled so far."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel background runs and wait for them to unwind."""
        for background in list(self._background):
            background.cancel()
        await asyncio.gather(*list(self._background), return_exceptions=True)
        self._background.clear()
