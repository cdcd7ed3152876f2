"""structlog configuration for the formkit CLI.

The domain and service modules log through ``logging.getLogger(__name__)``:
``formkit.domain.fields`` and ``formkit.domain.form`` record archive
cascades and condition changes at DEBUG, ``formkit.infrastructure.definitions``
records each loaded form, and ``formkit.services.base`` records failed
operations. ``AppContext`` calls :func:`configure_logging` once per
invocation; the records reach stderr through structlog's
``ProcessorFormatter`` as console lines, or as JSON lines with
``--log-json``. stdout carries only the rendered ServiceResult.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route formkit log records to stderr.

    Args:
        verbose: Show DEBUG records of the ``formkit`` loggers (``-v``).
            Otherwise only WARNING and above; other libraries always stay
            at WARNING.
        log_json: Render JSON lines instead of console lines (``--log-json``).
    """
    formkit_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("formkit").setLevel(formkit_level)
