"""
Logging setup for smartspace.

Library chatter (pypdf complaining about malformed PDFs, langdetect's
profile loading) is hidden unless debug mode is on. Every store also gets
an operations log recording admissions, rejections and deletions.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "smartspace"
OPS_LOG_FILENAME = "smartspace-ops.log"
OPS_LOG_MAX_BYTES = 1_000_000
OPS_LOG_BACKUPS = 3

DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
OPS_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# Third-party loggers that are noisy at INFO/WARNING
LIBRARY_LOGGERS = ("pypdf", "docx", "langdetect")


def configure_quiet_mode(quiet: bool = True):
    """
    Hide library warnings and log output below ERROR.

    Args:
        quiet: If False, leave library logging untouched.
    """
    if not quiet:
        return
    warnings.filterwarnings("ignore")
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in logger.handlers
    )


def enable_debug_mode():
    """Send everything, library output included, to stderr at DEBUG."""
    warnings.filterwarnings("default")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if not _has_stderr_handler(root):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(handler)

    for name in (APP_LOGGER,) + LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG)


def configure_ops_log(store_path) -> RotatingFileHandler:
    """Attach the store's operations log to the smartspace logger.

    The log lives at {store_path}/smartspace-ops.log, rotates at 1MB and
    keeps 3 backups. It records INFO and above whether or not --verbose
    is set. Returns the handler so close() can remove it again.
    """
    log_path = Path(store_path) / OPS_LOG_FILENAME
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=OPS_LOG_MAX_BYTES,
        backupCount=OPS_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(OPS_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.addHandler(handler)
    if app_logger.getEffectiveLevel() > logging.INFO:
        app_logger.setLevel(logging.INFO)
    return handler


def remove_ops_log(handler: RotatingFileHandler) -> None:
    """Detach and close a handler returned by configure_ops_log()."""
    logging.getLogger(APP_LOGGER).removeHandler(handler)
    handler.close()
