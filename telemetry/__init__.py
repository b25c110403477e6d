"""OpenTelemetry setup for the copilot service."""

import logging
import os

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.semconv.resource import ResourceAttributes

from config import SERVICE_NAME, SERVICE_VERSION

logger = logging.getLogger(__name__)


def init_telemetry(service_name: str = SERVICE_NAME, enable_console: bool = False) -> TracerProvider:
    """Install a global tracer provider for the agent and LLM spans.

    Args:
        service_name: Name of the service for tracing
        enable_console: Whether to print finished spans to stdout
    """
    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: service_name,
            ResourceAttributes.SERVICE_VERSION: SERVICE_VERSION,
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        endpoint = os.getenv("OTEL_ENDPOINT", "http://localhost:4317")
        try:
            # Optional; install the `otlp` extra to export over gRPC
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

            otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
            tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
            logger.info(f"OTLP telemetry enabled: {endpoint}")
        except Exception as e:
            logger.warning(f"OTLP export not available: {e}")

    if enable_console or os.getenv("OTEL_CONSOLE", "false").lower() == "true":
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console telemetry enabled")

    logger.info(f"Telemetry initialized for service: {service_name}")
    return tracer_provider
