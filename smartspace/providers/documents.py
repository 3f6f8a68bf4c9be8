"""
Text sampling from import sources.

A sample is a bounded prefix of an item's plain text, used only to
identify its language. Each content family has its own extraction
strategy; all of them return None (never "") when nothing usable comes out.
"""

import codecs
import logging
from pathlib import Path
from typing import Optional

from ..config import MAX_PDF_PAGES, SAMPLE_CAP
from ..types import ContentFamily

logger = logging.getLogger(__name__)


class TextSampler:
    """
    Extracts language-identification samples from files.

    Args:
        cap: Maximum sample size. Bytes read for plain text, characters
            for PDF and DOCX text.
        max_pdf_pages: Number of leading PDF pages consulted
    """

    def __init__(self, cap: int = SAMPLE_CAP, max_pdf_pages: int = MAX_PDF_PAGES):
        self.cap = cap
        self.max_pdf_pages = max_pdf_pages

    def sample(self, path: Path, family: ContentFamily) -> Optional[str]:
        """Sample a file according to its content family."""
        path = Path(path)
        match family:
            case ContentFamily.PLAIN_TEXT:
                return self.sample_plain_text(path)
            case ContentFamily.PDF:
                return self.sample_pdf(path)
            case ContentFamily.WORD_DOCUMENT:
                return self.sample_docx(path)
            case ContentFamily.UNSUPPORTED:
                return None
        raise ValueError(f"Unknown content family: {family!r}")

    def sample_plain_text(self, path: Path) -> Optional[str]:
        """Decode up to ``cap`` leading bytes as UTF-8.

        When the read stops at the cap, a multi-byte character split there
        is dropped rather than failing the decode. Invalid UTF-8 anywhere
        else, including a dangling lead byte at the real end of the file,
        yields None.
        """
        try:
            with open(path, "rb") as f:
                data = f.read(self.cap + 1)
        except OSError as e:
            logger.warning("Text extraction failed for %s: %s", path.name, e)
            return None

        if not data:
            return None
        truncated = len(data) > self.cap
        data = data[:self.cap]

        try:
            sample = codecs.getincrementaldecoder("utf-8")().decode(data, final=not truncated)
        except UnicodeDecodeError as e:
            logger.info("Not UTF-8 text: %s (%s)", path.name, e)
            return None

        return sample if sample.strip() else None

    def sample_pdf(self, path: Path) -> Optional[str]:
        """Join the text of the first pages, stopping once the cap is reached.

        Pages without a text layer are skipped. The joined sample is cut to
        exactly ``cap`` characters if the last page overshoots.
        """
        from pypdf import PdfReader

        try:
            reader = PdfReader(path)
            page_count = len(reader.pages)
        except Exception as e:
            logger.warning("Text extraction failed for %s: %s", path.name, e)
            return None

        parts: list[str] = []
        length = 0
        for index in range(min(page_count, self.max_pdf_pages)):
            try:
                text = reader.pages[index].extract_text()
            except Exception as e:
                logger.debug("Skipping page %d of %s: %s", index, path.name, e)
                continue
            text = (text or "").strip()
            if not text:
                continue
            if parts:
                length += 1  # separator
            parts.append(text)
            length += len(text)
            if length >= self.cap:
                break

        if not parts:
            return None
        return " ".join(parts)[:self.cap]

    def sample_docx(self, path: Path) -> Optional[str]:
        """Full document text (paragraphs, then tables), trimmed and capped."""
        from docx import Document as DocxDocument

        try:
            doc = DocxDocument(str(path))
            parts = [para.text for para in doc.paragraphs]
            for table in doc.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        parts.append(" | ".join(cells))
        except Exception as e:
            logger.warning("Text extraction failed for %s: %s", path.name, e)
            return None

        sample = "\n".join(parts).strip()
        if not sample:
            return None
        return sample[:self.cap]
