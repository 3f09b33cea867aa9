"""Health check models, enums, and data classes."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, Optional


class HealthStatus(StrEnum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single checker run."""
    name: str
    status: HealthStatus
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        """Check if result indicates healthy status."""
        return self.status == HealthStatus.HEALTHY

    @classmethod
    def from_error(cls, name: str, error: BaseException, duration_ms: float = 0.0) -> "CheckResult":
        """Build an unhealthy result describing ``error``."""
        details: Dict[str, Any] = {
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        check = getattr(error, "check", None)
        if check:
            details["check"] = check
        if error.__cause__:
            details["cause"] = str(error.__cause__)

        return cls(
            name=name,
            status=HealthStatus.UNHEALTHY,
            message=str(error),
            details=details,
            duration_ms=duration_ms,
            error=type(error).__name__,
        )
