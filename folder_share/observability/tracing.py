# folder_share/observability/tracing.py
"""
OpenTelemetry tracing bootstrap for the share service.

- Console exporter; spans cover FastAPI requests and SQLAlchemy statements.
- Only active when TRACING_ENABLED is set.
- Idempotent: safe to call once per app factory invocation.
"""
from __future__ import annotations

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from folder_share.config import Settings

_PROVIDER_INSTALLED = False


def init_tracing(settings: Settings, app=None, engine=None) -> bool:
    """Install the tracer provider and instrument the app/engine.

    Returns True when tracing was enabled.
    """
    global _PROVIDER_INSTALLED

    if not settings.TRACING_ENABLED:
        return False

    if not _PROVIDER_INSTALLED:
        resource = Resource.create({"service.name": settings.SERVICE_NAME})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(provider)

        if engine is not None:
            # patch the engine's sync core so every statement gets a span
            SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        _PROVIDER_INSTALLED = True

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)

    return True
