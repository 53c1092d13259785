"""structlog setup for billfold.

Events from ``structlog.get_logger(__name__)`` go through the stdlib
``billfold`` logger and are rendered to stderr, so command output on stdout
stays clean. The default level is WARNING; ``--verbose`` shows everything.
"""

import logging
import sys

import structlog

LOGGER_NAME = "billfold"


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route billfold's log events to stderr.

    Only the ``billfold`` logger is touched and its records do not reach the
    root logger. Calling this again replaces the previous handler.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        log_json: One JSON object per line instead of console output.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
