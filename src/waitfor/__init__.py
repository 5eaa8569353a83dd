"""Block until the dependencies of a process are ready."""

from importlib import metadata as _metadata

from waitfor.checks import database_ready, http_ready, redis_ready, service_listening
from waitfor.errors import DependenciesNotReady, RetryExhausted, WaitForError
from waitfor.runner import CheckResult, Dependencies, RetryPolicy, new_dependencies

__all__ = [
    "__version__",
    "CheckResult",
    "Dependencies",
    "DependenciesNotReady",
    "RetryExhausted",
    "RetryPolicy",
    "WaitForError",
    "database_ready",
    "http_ready",
    "new_dependencies",
    "redis_ready",
    "service_listening",
]

try:
    __version__ = _metadata.version("waitfor")
except _metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
