"""
Checker contract.

Every dependency type (document database, cache, broker) provides one
``Checker`` implementation. Callers hold collections of ``Checker`` and never
branch on the concrete type.
"""

from abc import ABC, abstractmethod
from types import TracebackType

from healthcheck.models import CheckResult


class Checker(ABC):
    """
    Abstract base class for dependency checkers.

    A checker owns exactly one connection to its dependency for its whole
    lifetime and releases it once, through ``close()``.
    """

    name: str = "checker"

    @abstractmethod
    async def status(self) -> CheckResult:
        """
        Probe the dependency.

        May block up to the configured dial timeout.

        Returns:
            A healthy CheckResult when every enabled check passed.

        Raises:
            ProbeError: A check failed; the subclass names which one.
            ConfigurationError: The configuration cannot support an enabled check.
        """

    @abstractmethod
    async def close(self) -> None:
        """
        Release the underlying connection within the dial timeout.

        Raises:
            ReleaseError: The connection could not be released in time.
        """

    async def __aenter__(self) -> "Checker":
        return self

    async def __aexit__(
            self,
            exc_type: type[BaseException] | None,
            exc: BaseException | None,
            tb: TracebackType | None,
    ) -> None:
        await self.close()
