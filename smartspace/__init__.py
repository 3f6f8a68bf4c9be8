"""
SmartSpace

Named spaces that collect documents and pasted text. Attachments are
admitted only when their text is in the supported language (English).

Quick Start:
    from smartspace import SmartSpace

    with SmartSpace() as ss:
        space = ss.create_space("Reading list")
        report = ss.import_files(["essay.pdf", "notes.txt"], space)
        for result in report.failures:
            print(result.source, result.error.message)

CLI Usage:
    smartspace create "Reading list"
    smartspace import "Reading list" essay.pdf
    smartspace paste "Reading list" "Some English text"

Default Store:
    ~/.smartspace/ (override with SMARTSPACE_STORE_PATH or an explicit path).
    Attachment files live in the store's Attachments/ directory.
"""

from .api import SmartSpace
from .errors import (
    CopyError,
    DirectoryError,
    DuplicateSpaceName,
    EmptyText,
    ExtractionFailed,
    ImportFailed,
    IngestError,
    LanguageUnsupported,
    PersistError,
    UnsupportedContainer,
)
from .ingest import ImportReport, ImportResult
from .lifecycle import DeletionReport
from .types import Attachment, BlockKind, ContentFamily, Space, SpaceBlock, SpaceMode, SpaceType

__all__ = [
    "SmartSpace",
    "Space",
    "SpaceBlock",
    "Attachment",
    "SpaceType",
    "SpaceMode",
    "BlockKind",
    "ContentFamily",
    "ImportReport",
    "ImportResult",
    "DeletionReport",
    "IngestError",
    "DirectoryError",
    "CopyError",
    "PersistError",
    "UnsupportedContainer",
    "ExtractionFailed",
    "ImportFailed",
    "LanguageUnsupported",
    "EmptyText",
    "DuplicateSpaceName",
]
