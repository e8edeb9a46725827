"""Diagnostic channel configuration for json-secure-logger.

``RequestLogger`` never raises to its caller; problems are reported here
instead, as structlog events named after what went wrong:

- ``empty_message`` / ``unsupported_message``: a ``log`` call was rejected
- ``payload_too_large``: the line was replaced with its summary
- ``serialization_failed``: the payload could not be rendered at all
- ``sink_failed``: the sink raised while writing the line
- ``invocation_started`` (debug): a new invocation context was created

The sink owns standard output, so diagnostics default to standard error and
never interleave with emitted log lines.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    json_format: bool = False,
    debug: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the diagnostic channel.

    Args:
        json_format: If True, render diagnostics as JSON lines.
        debug: If True, include ``invocation_started`` and other debug events.
        stream: Where diagnostics are written; standard error when None.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )
