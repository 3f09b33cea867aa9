from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Meter, NoOpMeterProvider
from opentelemetry.sdk.metrics import MeterProvider as SdkMeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from healthcheck.settings import Settings, get_settings


class HealthMetrics:
    """Metrics for health checks."""

    def __init__(self, settings: Settings | None = None, meter_name: str | None = None):
        self._settings = settings or get_settings()
        self._meter = self._create_meter(meter_name or self.__class__.__name__)
        self._create_instruments()

    def _create_meter(self, meter_name: str) -> Meter:
        # NoOp meter keeps exporter threads and network out of disabled setups
        settings = self._settings
        if not settings.ENABLE_METRICS or not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
            return NoOpMeterProvider().get_meter(meter_name)

        resource = Resource.create(
            {
                "service.name": settings.SERVICE_NAME,
                "service.version": settings.SERVICE_VERSION,
                "meter.name": meter_name,
            }
        )
        reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT),
            export_interval_millis=10000,
        )
        meter_provider = SdkMeterProvider(resource=resource, metric_readers=[reader])
        return meter_provider.get_meter(meter_name)

    def _create_instruments(self) -> None:
        self.health_check_status = self._meter.create_histogram(
            name="health.check.status",
            description="Health check status (1=healthy, 0=unhealthy)",
            unit="1"
        )

        self.health_check_duration = self._meter.create_histogram(
            name="health.check.duration",
            description="Time taken to perform health check in seconds",
            unit="s"
        )

        self.health_check_failures = self._meter.create_counter(
            name="health.check.failures.total",
            description="Total number of health check failures",
            unit="1"
        )

        self.health_checks_executed = self._meter.create_counter(
            name="health.checks.executed.total",
            description="Total number of health checks executed",
            unit="1"
        )

        self.overall_health_status = self._meter.create_histogram(
            name="service.health.status",
            description="Overall health flag (1=all checks passed, 0=otherwise)",
            unit="1"
        )

    def record_health_check_duration(self, duration_seconds: float, check_name: str) -> None:
        attributes = {"check_name": check_name}
        self.health_check_duration.record(duration_seconds, attributes=attributes)
        self.health_checks_executed.add(1, attributes=attributes)

    def record_health_check_failure(self, check_name: str, failure_type: str) -> None:
        self.health_check_failures.add(
            1,
            attributes={
                "check_name": check_name,
                "failure_type": failure_type
            }
        )

    def update_health_check_status(self, is_healthy: bool, check_name: str) -> None:
        self.health_check_status.record(
            1 if is_healthy else 0,
            attributes={"check_name": check_name}
        )

    def update_overall_health(self, is_healthy: bool) -> None:
        self.overall_health_status.record(
            1 if is_healthy else 0,
            attributes={"service": self._settings.SERVICE_NAME}
        )
