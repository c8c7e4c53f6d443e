"""
Root logger setup.

One stdout handler on the root logger; the format carries the
correlation id so API requests and pipeline runs can be followed across
interleaved tasks. Calling configure_logging again replaces the handler
instead of stacking a second one.
"""

import logging
import sys

from spacerag.observability.correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Client libraries that log every request/statement at INFO or DEBUG.
QUIET_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")

_HANDLER_NAME = "spacerag-stdout"


def configure_logging(level: str = "INFO") -> logging.Handler:
    """
    Install the spacerag handler on the root logger.

    Args:
        level: Root log level name (already validated by Settings)

    Returns:
        logging.Handler: The installed handler
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root.setLevel(level.upper())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
