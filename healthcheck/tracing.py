from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

__all__ = ["SpanKind", "get_tracer", "trace_span"]


def get_tracer() -> trace.Tracer:
    return trace.get_tracer("healthcheck")


@contextmanager
def trace_span(
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: dict[str, Any] | None = None,
        set_status_on_exception: bool = True,
        tracer: trace.Tracer | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a traced span.

    Args:
        name: Name of the span
        kind: Kind of span (INTERNAL, CLIENT, SERVER, etc.)
        attributes: Additional attributes to set on the span
        set_status_on_exception: Whether to set error status on exception
        tracer: Optional tracer to use, defaults to the package tracer

    Yields:
        The created span
    """
    if tracer is None:
        tracer = get_tracer()

    with tracer.start_as_current_span(
            name,
            kind=kind,
            attributes=attributes or {},
            record_exception=False,
            set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            if set_status_on_exception:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
            raise
