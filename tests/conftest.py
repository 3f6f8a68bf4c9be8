"""
Shared pytest fixtures for smartspace tests.

Provides a keyword-based language identifier so tests don't depend on
langdetect's probabilistic guesses, and builders for PDF and DOCX files.
"""

import re
from pathlib import Path

import pytest
from docx import Document

from smartspace.gate import LanguageGate
from smartspace.ingest import Ingestor
from smartspace.lifecycle import AttachmentLifecycle
from smartspace.space_store import SpaceStore
from smartspace.storage import AttachmentStorage


ENGLISH_TEXT = (
    "The quick brown fox jumps over the lazy dog. It is one of the oldest "
    "typing exercises and it uses every letter of the alphabet."
)
SPANISH_TEXT = (
    "El veloz murciélago hindú comía feliz cardillo y kiwi. La cigüeña tocaba "
    "el saxofón detrás del palenque de paja, y los niños que miraban reían."
)


class KeywordIdentifier:
    """
    Deterministic language identifier for tests.

    Counts common English and Spanish function words; returns the language
    with more hits, or None when neither appears.
    """

    ENGLISH = {"the", "and", "is", "of", "to", "it", "over", "uses"}
    SPANISH = {"el", "la", "los", "y", "que", "de", "del"}

    def __init__(self):
        self.samples: list[str] = []

    def identify(self, sample: str) -> str | None:
        self.samples.append(sample)
        words = re.findall(r"[a-záéíóúñü]+", sample.lower())
        en = sum(1 for w in words if w in self.ENGLISH)
        es = sum(1 for w in words if w in self.SPANISH)
        if en == 0 and es == 0:
            return None
        return "en" if en >= es else "es"


class FixedIdentifier:
    """Always returns the same tag."""

    def __init__(self, language: str | None):
        self.language = language

    def identify(self, sample: str) -> str | None:
        return self.language


def make_pdf(path: Path, pages: list[str]) -> Path:
    """Write a minimal PDF with one line of Helvetica text per page.

    An empty string produces a page with no text layer.
    """
    objects: list[bytes] = []
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode())
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    for i, text in enumerate(pages):
        objects.append((
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
        ).encode())
        if text:
            escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
            stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        else:
            stream = b""
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    path.write_bytes(bytes(out))
    return path


def make_docx(path: Path, paragraphs: list[str], table: list[list[str]] | None = None) -> Path:
    """Write a DOCX with the given paragraphs and an optional table."""
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        t = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    doc.save(str(path))
    return path


@pytest.fixture
def identifier():
    return KeywordIdentifier()


@pytest.fixture
def store(tmp_path):
    s = SpaceStore(tmp_path / "store" / "spaces.db")
    yield s
    s.close()


@pytest.fixture
def storage(tmp_path):
    return AttachmentStorage(tmp_path / "store")


@pytest.fixture
def space(store):
    return store.create_space("Reading")


@pytest.fixture
def ingestor(storage, store, identifier):
    return Ingestor(storage=storage, store=store, gate=LanguageGate(identifier))


@pytest.fixture
def lifecycle(storage, store):
    return AttachmentLifecycle(storage, store)


@pytest.fixture
def sources(tmp_path):
    """Directory for files being imported (outside the store)."""
    d = tmp_path / "sources"
    d.mkdir()
    return d


@pytest.fixture
def stored_files(storage):
    """Callable listing attachment files on disk (ignores the backup tag)."""
    def _list() -> list[str]:
        if not storage.directory.exists():
            return []
        return sorted(
            p.name for p in storage.directory.iterdir()
            if p.is_file() and p.name != "CACHEDIR.TAG"
        )
    return _list


@pytest.fixture
def english_text():
    return ENGLISH_TEXT


@pytest.fixture
def spanish_text():
    return SPANISH_TEXT


@pytest.fixture
def pdf_factory():
    """make_pdf(path, pages) as a fixture."""
    return make_pdf


@pytest.fixture
def docx_factory():
    """make_docx(path, paragraphs, table=None) as a fixture."""
    return make_docx


@pytest.fixture
def fixed_identifier():
    """Factory for identifiers that always return the given tag."""
    return FixedIdentifier
