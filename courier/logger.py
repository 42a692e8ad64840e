"""
Structured logging setup.
Configured once at startup; modules call structlog.get_logger(__name__).
"""

import logging
import os
import sys

import structlog


def _event_text_renderer(logger, name, event_dict):
    event = event_dict.pop("event", "")
    level = event_dict.pop("level", "info").upper()
    timestamp = event_dict.pop("timestamp", "")
    extras = " ".join(f"{key}={value}" for key, value in event_dict.items())
    return f"{timestamp} [{level}] {event} {extras}".rstrip()


def setup_logging(service_name, log_level="INFO", log_format="json"):
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if str(log_format).lower() == "json"
        else _event_text_renderer
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)

    # werkzeug access lines duplicate our request log
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    return structlog.get_logger(service_name).bind(
        service=service_name,
        container_id=os.getenv("HOSTNAME", "unknown"),
    )
