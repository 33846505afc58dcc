"""
Logging setup: console and rotating file handlers, with optional OpenTelemetry export.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from opentelemetry import _logs, trace
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from sqlbridge.config import settings

_initialized = False


def get_root_logger() -> logging.Logger:
    """Return the process-wide root logger."""
    return logging.getLogger("")


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _build_file_handler(log_dir: str, log_file: str, formatter: logging.Formatter) -> RotatingFileHandler:
    os.makedirs(log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    return file_handler


def _otel_handler(service_name: str, level: str | int) -> logging.Handler:
    resource = Resource.create({"service.name": service_name})

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter()))
    _logs.set_logger_provider(logger_provider)

    LoggingInstrumentor().instrument(set_logging_format=False)
    return LoggingHandler(level=level, logger_provider=logger_provider)


def setup_logging(
    *,
    level: Optional[str | int] = None,
    with_console: bool = True,
    to_file: Optional[bool] = None,
    with_otel: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure application logging once per process.
    Later calls only adjust the root level.
    """
    global _initialized

    root = get_root_logger()
    level = level or settings.LOG_LEVEL.upper()
    root.setLevel(level)
    if _initialized:
        return root
    _initialized = True

    formatter = _build_formatter()
    handlers: list[logging.Handler] = []
    if with_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        handlers.append(console)
    if settings.LOG_TO_FILE if to_file is None else to_file:
        handlers.append(_build_file_handler(settings.LOG_DIR, settings.LOG_FILE, formatter))
    if settings.OTEL_ENABLED if with_otel is None else with_otel:
        handlers.append(_otel_handler(settings.OTEL_SERVICE_NAME, level))

    existing = set(root.handlers)
    for handler in handlers:
        if handler not in existing:
            root.addHandler(handler)
    return root
