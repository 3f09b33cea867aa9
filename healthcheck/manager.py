"""Health check manager for running a set of checkers on demand."""
import asyncio
import time
from types import TracebackType
from typing import Dict, List, Optional

from healthcheck.base import Checker
from healthcheck.checkers.mongo import MongoChecker, MongoConfig
from healthcheck.flag import HealthFlag
from healthcheck.logging import check_name_context, logger
from healthcheck.metrics import HealthMetrics
from healthcheck.models import CheckResult
from healthcheck.settings import Settings, get_settings
from healthcheck.tracing import SpanKind, trace_span


class HealthCheckManager:
    """Holds heterogeneous checkers and presents their individual results.

    When a ``HealthFlag`` is given, every ``run_all_checks`` call writes into it
    whether all registered checkers passed.
    """

    def __init__(self, flag: Optional[HealthFlag] = None, metrics: Optional[HealthMetrics] = None) -> None:
        self._checks: Dict[str, Checker] = {}
        self.flag = flag
        self.metrics = metrics or HealthMetrics()

    def register_check(self, checker: Checker) -> None:
        """Register a checker.

        Args:
            checker: Checker to register

        Raises:
            ValueError: If a checker with the same name is already registered
        """
        if checker.name in self._checks:
            raise ValueError(f"Health check {checker.name} is already registered")
        self._checks[checker.name] = checker
        logger.info(f"Registered health check: {checker.name}")

    def unregister_check(self, name: str) -> Optional[Checker]:
        """Unregister a checker without closing it.

        Args:
            name: Name of the checker to unregister

        Returns:
            The removed checker, or None if not found
        """
        checker = self._checks.pop(name, None)
        if checker is not None:
            logger.info(f"Unregistered health check: {name}")
        return checker

    def get_registered_checks(self) -> List[str]:
        return list(self._checks.keys())

    async def _run_check(self, name: str, checker: Checker) -> CheckResult:
        token = check_name_context.set(name)
        start_time = time.monotonic()
        try:
            with trace_span(
                    name=f"health_check.{name}",
                    kind=SpanKind.CLIENT,
                    attributes={"health_check.name": name},
            ):
                result = await checker.status()
        except Exception as e:
            logger.error(f"Health check {name} failed: {e}")
            result = CheckResult.from_error(name, e)
        finally:
            check_name_context.reset(token)

        duration_seconds = time.monotonic() - start_time
        result.duration_ms = duration_seconds * 1000

        self.metrics.record_health_check_duration(duration_seconds, name)
        self.metrics.update_health_check_status(result.is_healthy, name)
        if not result.is_healthy:
            self.metrics.record_health_check_failure(name, result.error or "unknown")

        return result

    async def run_all_checks(self) -> Dict[str, CheckResult]:
        """Run all registered checkers concurrently.

        Returns:
            Dictionary mapping check names to results
        """
        names = list(self._checks.keys())
        completed = await asyncio.gather(
            *(self._run_check(name, self._checks[name]) for name in names)
        )
        results = dict(zip(names, completed, strict=True))

        all_healthy = bool(results) and all(r.is_healthy for r in results.values())
        if self.flag is not None:
            previous = self.flag.val()
            self.flag.set(all_healthy)
            if previous != all_healthy:
                logger.info(f"Overall health changed: {str(previous).lower()} -> {self.flag}")
        self.metrics.update_overall_health(all_healthy)

        return results

    async def get_check_result(self, name: str) -> Optional[CheckResult]:
        """Run a single checker.

        Args:
            name: Name of the checker

        Returns:
            Check result or None if not found
        """
        checker = self._checks.get(name)
        if checker is None:
            return None
        return await self._run_check(name, checker)

    async def close_all(self) -> None:
        """Close every registered checker.

        Every checker is attempted; the first error is raised afterwards.
        """
        errors: List[Exception] = []
        for name, checker in list(self._checks.items()):
            try:
                await checker.close()
            except Exception as e:
                logger.error(f"Failed to close health check {name}: {e}")
                errors.append(e)
        self._checks.clear()
        logger.info("Closed all health checks")

        if errors:
            raise errors[0]

    async def __aenter__(self) -> "HealthCheckManager":
        return self

    async def __aexit__(
            self,
            exc_type: type[BaseException] | None,
            exc: BaseException | None,
            tb: TracebackType | None,
    ) -> None:
        await self.close_all()


async def create_health_check_manager(
        settings: Optional[Settings] = None,
        flag: Optional[HealthFlag] = None,
) -> HealthCheckManager:
    """Build a manager with every checker the settings configure.

    Raises:
        ConfigurationError: If a configured checker is invalid.
        CheckerConnectionError: If a configured dependency is unreachable.
    """
    settings = settings or get_settings()
    manager = HealthCheckManager(flag=flag, metrics=HealthMetrics(settings))

    mongo_config = MongoConfig.from_settings(settings)
    if mongo_config is not None:
        manager.register_check(await MongoChecker.create(mongo_config))

    logger.info(f"Health check manager initialized with {len(manager.get_registered_checks())} checks")
    return manager
