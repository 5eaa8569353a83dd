"""Errors raised when dependencies do not become ready."""

from __future__ import annotations

from typing import Iterable


class WaitForError(Exception):
    """Base class for errors raised by this package."""


class RetryExhausted(WaitForError):
    """A single dependency never passed its check within the retry budget."""

    def __init__(self, name: str, last_error: BaseException) -> None:
        self.name = name
        self.last_error = last_error
        super().__init__(f"Timeout waiting for {name} because [{last_error}]")


class DependenciesNotReady(WaitForError):
    """Every dependency that failed during one wait, one line per dependency."""

    def __init__(self, failures: Iterable[RetryExhausted]) -> None:
        self.failures = sorted(failures, key=lambda failure: failure.name)
        super().__init__("\n".join(str(failure) for failure in self.failures))

    @property
    def names(self) -> list[str]:
        return [failure.name for failure in self.failures]


__all__ = ["WaitForError", "RetryExhausted", "DependenciesNotReady"]
