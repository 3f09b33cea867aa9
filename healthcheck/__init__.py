"""Dependency health checks.

The package is organized into:
- flag: thread-safe boolean health state
- base: the Checker contract
- checkers: per-dependency Checker implementations
- manager: on-demand runs over a set of checkers
- models / exceptions: results and the error taxonomy
"""

from healthcheck.base import Checker
from healthcheck.checkers import (
    DEFAULT_DIAL_TIMEOUT,
    MongoAuthConfig,
    MongoChecker,
    MongoConfig,
    MongoCredentials,
)
from healthcheck.exceptions import (
    CheckerConnectionError,
    ConfigurationError,
    HealthCheckError,
    PingFailedError,
    ProbeError,
    QueryFailedError,
    ReleaseError,
    ResourceNotFoundError,
)
from healthcheck.flag import HealthFlag
from healthcheck.manager import HealthCheckManager, create_health_check_manager
from healthcheck.models import CheckResult, HealthStatus

__all__ = [
    # State
    "HealthFlag",
    # Models
    "CheckResult",
    "HealthStatus",
    # Contract
    "Checker",
    # MongoDB
    "DEFAULT_DIAL_TIMEOUT",
    "MongoAuthConfig",
    "MongoChecker",
    "MongoConfig",
    "MongoCredentials",
    # Manager
    "HealthCheckManager",
    "create_health_check_manager",
    # Errors
    "HealthCheckError",
    "ConfigurationError",
    "CheckerConnectionError",
    "ProbeError",
    "PingFailedError",
    "ResourceNotFoundError",
    "QueryFailedError",
    "ReleaseError",
]
