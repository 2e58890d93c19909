"""structlog configuration for the API and the migration script."""

import logging
import sys

import structlog

# Clients that log every HTTP round trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "hpack")


def setup_logging(debug: bool = False) -> None:
    """
    Configure structlog and stdlib logging.

    Debug: colored console output, tracebacks pretty-printed by the renderer.
    Otherwise: one JSON object per line, tracebacks as structured dicts so a
    failed function call stays a single log record.
    """
    level = logging.DEBUG if debug else logging.INFO

    processors: list = [
        structlog.contextvars.merge_contextvars,  # request_id, method, path, property_id
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)
