"""
Content-family classification for import sources.
"""

import mimetypes
from pathlib import Path
from typing import Optional

from .types import ContentFamily

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

EXTENSION_TYPES = {
    ".txt": "text/plain",
    ".text": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".rst": "text/x-rst",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xml": "application/xml",
    ".pdf": PDF_TYPE,
    ".docx": DOCX_TYPE,
}

# Non text/* types that are still read as plain text
TEXT_LIKE_TYPES = frozenset({
    "application/json",
    "application/xml",
    "application/x-yaml",
})

# Content types offered to file pickers
SUPPORTED_CONTENT_TYPES = (PDF_TYPE, "text/plain", "text/plain; charset=utf-8", DOCX_TYPE)


def infer_content_type(path: Path) -> Optional[str]:
    """Content type from the file extension, or None if unknown."""
    suffix = path.suffix.lower()
    if suffix in EXTENSION_TYPES:
        return EXTENSION_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed


def family_for_type(content_type: str) -> ContentFamily:
    """Map a MIME type (parameters allowed) to its content family."""
    base = content_type.split(";", 1)[0].strip().lower()
    if base == PDF_TYPE:
        return ContentFamily.PDF
    if base == DOCX_TYPE:
        return ContentFamily.WORD_DOCUMENT
    if base.startswith("text/") or base in TEXT_LIKE_TYPES:
        return ContentFamily.PLAIN_TEXT
    return ContentFamily.UNSUPPORTED


def classify(path: Path, declared_type: Optional[str] = None) -> ContentFamily:
    """
    Classify a source into a content family.

    The declared type wins when given; otherwise the type is inferred from
    the file extension. A source whose type resolves to nothing is
    UNSUPPORTED.

    Args:
        path: Source file path (only the name is consulted)
        declared_type: Content type reported by the caller, if any

    Returns:
        The content family
    """
    content_type = declared_type or infer_content_type(Path(path))
    if not content_type:
        return ContentFamily.UNSUPPORTED
    return family_for_type(content_type)
