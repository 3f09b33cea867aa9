"""Error taxonomy shared by every checker.

Configuration errors are raised before any network I/O. Connection errors
abort checker construction. Probe errors come out of ``status()`` and tell an
unreachable dependency apart from a missing resource. Release errors come out
of ``close()``.
"""


class HealthCheckError(Exception):
    """Base exception for health check errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(HealthCheckError):
    """Checker configuration is missing or invalid."""


class CheckerConnectionError(HealthCheckError):
    """Initial connection or liveness probe failed while building a checker."""


class ProbeError(HealthCheckError):
    """A live probe run by ``status()`` failed."""

    check: str = "probe"


class PingFailedError(ProbeError):
    check = "ping"


class ResourceNotFoundError(ProbeError):
    """The dependency answered, but the expected resource does not exist."""

    check = "existence"


class QueryFailedError(ProbeError):
    """The existence query itself could not be completed."""

    check = "existence"


class ReleaseError(HealthCheckError):
    """The underlying connection could not be released in time."""
