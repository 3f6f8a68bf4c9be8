"""
Error types for attachment ingestion, and error logging for the CLI.

Every ingestion failure is an IngestError carrying a message fit to show
the user. Full stack traces of unexpected errors go to an error log file.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import STORE_PATH_ENV, SUPPORTED_LANGUAGE_NAME


LANGUAGE_UNSUPPORTED_MESSAGE = (
    f"The file language is not supported. "
    f"Please import {SUPPORTED_LANGUAGE_NAME} text files."
)
EMPTY_TEXT_MESSAGE = (
    f"Text cannot be empty. Paste some {SUPPORTED_LANGUAGE_NAME} text to save."
)


class IngestError(Exception):
    """Base class for import failures. ``message`` is user-facing."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source


class DirectoryError(IngestError):
    """The attachment directory could not be created or configured.

    Fatal for a whole import batch.
    """

    def __init__(self, directory: Path, cause: OSError):
        super().__init__(f"Cannot prepare attachment directory {directory}: {cause}")
        self.directory = directory
        self.__cause__ = cause


class CopyError(IngestError):
    """Writing an item into the attachment directory failed."""

    def __init__(self, source: str, cause: OSError):
        super().__init__(f"Could not copy '{source}': {cause}", source=source)
        self.__cause__ = cause


class PersistError(IngestError):
    """The attachment record could not be stored; the written file was removed."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"Could not save '{source}': {cause}", source=source)
        self.__cause__ = cause


class UnsupportedContainer(IngestError):
    """The item's content family could not be resolved."""

    def __init__(self, source: str):
        super().__init__(LANGUAGE_UNSUPPORTED_MESSAGE, source=source)


class ExtractionFailed(IngestError):
    """No usable text sample could be extracted."""

    def __init__(self, source: str):
        super().__init__(LANGUAGE_UNSUPPORTED_MESSAGE, source=source)


class LanguageUnsupported(IngestError):
    """The language gate rejected the sample."""

    def __init__(self, detected: Optional[str], source: Optional[str] = None):
        super().__init__(LANGUAGE_UNSUPPORTED_MESSAGE, source=source)
        self.detected = detected


class EmptyText(IngestError):
    """Pasted text was empty after trimming."""

    def __init__(self):
        super().__init__(EMPTY_TEXT_MESSAGE)


class ImportFailed(IngestError):
    """An unexpected error stopped one item of a batch."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"Could not import '{source}': {cause}", source=source)
        self.__cause__ = cause


class DuplicateSpaceName(ValueError):
    """A live space already uses this name (ignoring case and diacritics)."""


def _error_log_path(store_path: Optional[Path] = None) -> Path:
    """Resolve error log path, respecting --store and SMARTSPACE_STORE_PATH."""
    store = store_path or os.environ.get(STORE_PATH_ENV)
    if store:
        return Path(store) / "smartspace-errors.log"
    return Path.home() / ".smartspace" / "smartspace-errors.log"


def log_exception(exc: Exception, context: str = "", store_path: Optional[Path] = None) -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)
        store_path: Store root the log belongs in, if known

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path(store_path)
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Nowhere left to report it
    return log_path
