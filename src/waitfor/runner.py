"""Dependency registry and concurrent retry runner."""

from __future__ import annotations

import asyncio
import inspect
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from pydantic import BaseModel, ConfigDict, Field

from waitfor.errors import DependenciesNotReady, RetryExhausted
from waitfor.logging import logger

DEFAULT_RETRIES = 10
DEFAULT_INTERVAL = 10.0  # seconds slept between failed attempts

Check = Callable[[], Union[Any, Awaitable[Any]]]


class RetryPolicy(BaseModel):
    """Attempts allowed per check and the pause after each failed attempt."""

    model_config = ConfigDict(frozen=True)

    retries: int = Field(default=DEFAULT_RETRIES, ge=1)
    interval: float = Field(default=DEFAULT_INTERVAL, ge=0, allow_inf_nan=False)


@dataclass(slots=True)
class CheckResult:
    name: str
    ok: bool
    attempts: int
    duration: float
    error: Exception | None = None

    @property
    def details(self) -> str:
        if self.ok:
            return f"ready after {self.attempts} attempt(s)"
        return f"not ready after {self.attempts} attempt(s): {self.error}"

    @property
    def failure(self) -> RetryExhausted | None:
        if self.ok or self.error is None:
            return None
        failure = RetryExhausted(self.name, self.error)
        failure.__cause__ = self.error
        return failure


async def _attempt(check: Check, executor: Executor | None) -> None:
    if inspect.iscoroutinefunction(check):
        await check()
        return
    loop = asyncio.get_running_loop()
    outcome = await loop.run_in_executor(executor, check)
    if inspect.isawaitable(outcome):
        await outcome


async def perform_check(
    name: str,
    check: Check,
    policy: RetryPolicy,
    executor: Executor | None = None,
) -> CheckResult:
    """Run ``check`` until it passes or ``policy.retries`` attempts have failed.

    Sync checks run on ``executor`` (the loop's default executor when None) so a
    blocking dial never stalls the other workers. The error from the final
    attempt is kept on the result; earlier errors are only logged.
    """
    started = time.monotonic()
    error: Exception | None = None
    for attempt in range(1, policy.retries + 1):
        try:
            await _attempt(check, executor)
        except Exception as exc:
            error = exc
            logger.debug(
                "Check for {dependency} failed",
                dependency=name,
                attempt=attempt,
                error=repr(exc),
            )
            if attempt < policy.retries:
                await asyncio.sleep(policy.interval)
            continue
        return CheckResult(name=name, ok=True, attempts=attempt, duration=time.monotonic() - started)
    return CheckResult(
        name=name,
        ok=False,
        attempts=policy.retries,
        duration=time.monotonic() - started,
        error=error,
    )


class Dependencies:
    """Named readiness checks that are waited on together.

    Example::

        dependencies = new_dependencies()
        dependencies.add("rest-endpoint", service_listening("0.0.0.0:8443", 10))
        dependencies.wait()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._checks: dict[str, Check] = {}

    def add(self, name: str, check: Check) -> None:
        """Register ``check`` under ``name``, replacing any earlier check."""
        if not callable(check):
            raise TypeError(f"Check for {name!r} must be callable, got {type(check).__name__}")
        with self._lock:
            self._checks[name] = check

    def names(self) -> list[str]:
        with self._lock:
            return list(self._checks)

    def _snapshot(self) -> dict[str, Check]:
        with self._lock:
            return dict(self._checks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._checks)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._checks

    async def run(self, policy: RetryPolicy | None = None) -> list[CheckResult]:
        """Check every dependency concurrently and return all outcomes."""
        policy = policy or RetryPolicy()
        checks = self._snapshot()
        if not checks:
            return []

        with ThreadPoolExecutor(max_workers=len(checks), thread_name_prefix="waitfor") as executor:
            results = await asyncio.gather(
                *(self._watch(name, check, policy, executor) for name, check in checks.items())
            )
        return list(results)

    async def _watch(
        self,
        name: str,
        check: Check,
        policy: RetryPolicy,
        executor: Executor,
    ) -> CheckResult:
        logger.info("Waiting for {dependency}", dependency=name)
        result = await perform_check(name, check, policy, executor)
        if result.ok:
            logger.debug("{dependency} is ready", dependency=name, attempts=result.attempts)
        else:
            logger.warning(
                "{dependency} is not ready",
                dependency=name,
                attempts=result.attempts,
                error=str(result.error),
            )
        return result

    async def wait_async(self, policy: RetryPolicy | None = None) -> None:
        """Wait for every dependency, raising ``DependenciesNotReady`` if any stays down."""
        results = await self.run(policy)
        failures = [result.failure for result in results if not result.ok]
        if failures:
            raise DependenciesNotReady(failures)

    def wait(self, policy: RetryPolicy | None = None) -> None:
        """Blocking form of :meth:`wait_async`. Not usable inside a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.wait_async(policy))
            return
        raise RuntimeError("Dependencies.wait() cannot run inside an event loop; await wait_async() instead")


def new_dependencies() -> Dependencies:
    return Dependencies()


__all__ = [
    "Check",
    "CheckResult",
    "DEFAULT_INTERVAL",
    "DEFAULT_RETRIES",
    "Dependencies",
    "RetryPolicy",
    "new_dependencies",
    "perform_check",
]
