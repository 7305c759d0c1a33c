"""Observability configuration for OpenTelemetry tracing.

Call `configure_observability()` at the very start of application startup
(before importing FastAPI) so Azure Monitor instrumentation, when enabled,
can patch the HTTP stack.

PII guidance:
- NEVER record prompts, generated recipe text, or ingredient lists in span
  attributes; they are user-provided content.
- Record identifiers and sizes instead (part ids, model ids, delta counts).
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from opentelemetry import trace


logger = logging.getLogger(__name__)

# Environment variable names
_ENV_ENABLE_OBSERVABILITY = "ENABLE_OBSERVABILITY"
_ENV_APP_INSIGHTS_CONN_STRING = "APPLICATIONINSIGHTS_CONNECTION_STRING"
_ENV_OTEL_SERVICE_NAME = "OTEL_SERVICE_NAME"

_DEFAULT_SERVICE_NAME = "pantrychef-api"

# Paths to exclude from automatic tracing (reduce noise for health checks)
EXCLUDED_URLS = "health,health/,favicon.ico"


def _is_observability_enabled() -> bool:
    """Check ENABLE_OBSERVABILITY for a truthy value (default: disabled)."""
    value = os.getenv(_ENV_ENABLE_OBSERVABILITY, "false").lower()
    return value in {"true", "1", "yes", "on"}


@lru_cache
def configure_observability() -> bool:
    """Configure Azure Monitor export when enabled and configured.

    Returns:
        True if an exporter was configured, False otherwise. Without an
        exporter the OpenTelemetry API hands out no-op tracers.

    Environment Variables:
        ENABLE_OBSERVABILITY: Set to "true" to enable (default: "false")
        APPLICATIONINSIGHTS_CONNECTION_STRING: Azure Monitor connection string
        OTEL_SERVICE_NAME: Service name for traces (default: "pantrychef-api")
    """
    if not _is_observability_enabled():
        logger.info(
            "Observability disabled. Set %s=true to enable Azure Monitor.",
            _ENV_ENABLE_OBSERVABILITY,
        )
        return False

    connection_string = os.getenv(_ENV_APP_INSIGHTS_CONN_STRING)
    if not connection_string:
        logger.warning(
            "Observability enabled but %s not set. Skipping Azure Monitor setup.",
            _ENV_APP_INSIGHTS_CONN_STRING,
        )
        return False

    try:
        # Optional extra: pip install "pantrychef[observability]"
        from azure.monitor.opentelemetry import configure_azure_monitor
    except ImportError:
        logger.warning(
            "azure-monitor-opentelemetry package not installed. "
            "Install the 'observability' extra to export traces."
        )
        return False

    os.environ.setdefault(_ENV_OTEL_SERVICE_NAME, _DEFAULT_SERVICE_NAME)
    os.environ.setdefault("OTEL_PYTHON_FASTAPI_EXCLUDED_URLS", EXCLUDED_URLS)
    try:
        configure_azure_monitor(connection_string=connection_string)
    except Exception as e:
        logger.error("Failed to configure Azure Monitor: %s", e)
        return False

    logger.info(
        "Azure Monitor observability configured for service '%s'",
        os.environ[_ENV_OTEL_SERVICE_NAME],
    )
    return True


def get_tracer(name: str) -> trace.Tracer:
    """Get an OpenTelemetry tracer for custom spans.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("generation.execute") as span:
            span.set_attribute("generation.part", part)

    WARNING: Never add user content or PII to span attributes!
    """
    return trace.get_tracer(name)
