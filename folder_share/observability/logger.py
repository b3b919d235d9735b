# folder_share/observability/logger.py

# structured JSON logger
import logging
import os
import sys

from opentelemetry import trace
from pythonjsonlogger import jsonlogger


class TraceIdFilter(logging.Filter):
    """Inject trace_id into the record if a span is active."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            ctx = trace.get_current_span().get_span_context()
            record.trace_id = f"{ctx.trace_id:032x}" if ctx and ctx.trace_id else ""
        return True


def _build_formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(
        fmt=(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(pathname)s %(lineno)d %(trace_id)s"
        ),
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(config_module) -> None:
    """Configure root logging and align existing loggers to JSON formatting.

    - Reuses the access/error file handlers from utils.logger, switched to JSON.
    - Adds a JSON console handler (stdout).
    - Injects trace_id when tracing is enabled.
    """
    root = logging.getLogger()
    root.setLevel(getattr(config_module, "LOG_LEVEL", "INFO"))

    formatter = _build_formatter()
    trace_filter = TraceIdFilter()

    os.makedirs(getattr(config_module, "LOGS_PATH", "logs"), exist_ok=True)

    # Replace formatters on the file handlers set up by utils.logger
    for logger_name in ("access", "error"):
        lg = logging.getLogger(logger_name)
        lg.propagate = False  # keep file routing stable
        for h in list(lg.handlers):
            h.setFormatter(formatter)
            if trace_filter not in h.filters:
                h.addFilter(trace_filter)

    # Add a JSON console handler on root (single instance)
    have_console = any(isinstance(h, logging.StreamHandler) for h in root.handlers)
    if not have_console:
        console = logging.StreamHandler(stream=sys.stdout)
        console.setFormatter(formatter)
        console.addFilter(trace_filter)
        root.addHandler(console)

    logging.getLogger("startup").info("logging configured")
