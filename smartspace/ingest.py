"""
Attachment ingestion.

One import runs classify -> sample -> gate -> persist for each item.
An item ends Admitted (attachment stored and recorded), or with an
IngestError. No file written for a rejected or failed item is left behind,
and no record is created for it.

Files are copied first and the stored copy is sampled, so the item that is
judged is byte-for-byte the item that is kept.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Protocol, Union

from .classifier import classify
from .config import PASTED_DISPLAY_NAME
from .errors import (
    CopyError,
    EmptyText,
    ExtractionFailed,
    ImportFailed,
    IngestError,
    PersistError,
    UnsupportedContainer,
)
from .gate import LanguageGate
from .protocol import SpaceStoreProtocol
from .providers.documents import TextSampler
from .storage import AttachmentStorage
from .types import Attachment, ContentFamily, Space

logger = logging.getLogger(__name__)

Source = Union[str, Path]


class SourceAccess(Protocol):
    """
    Grants temporary read access to a caller-supplied file.

    acquire() returns True when access was actually granted and must be
    released afterwards.
    """

    def acquire(self, path: Path) -> bool: ...

    def release(self, path: Path) -> None: ...


class UnrestrictedAccess:
    """Access policy for plain filesystems: nothing to acquire."""

    def acquire(self, path: Path) -> bool:
        return False

    def release(self, path: Path) -> None:
        pass


@contextmanager
def scoped_access(access: SourceAccess, path: Path) -> Iterator[None]:
    """Hold source access for the block; released on every exit path."""
    acquired = access.acquire(path)
    try:
        yield
    finally:
        if acquired:
            access.release(path)


@dataclass
class ImportResult:
    """Outcome of one item: an attachment, or the error that stopped it."""
    source: str
    attachment: Optional[Attachment] = None
    error: Optional[IngestError] = None

    @property
    def admitted(self) -> bool:
        return self.attachment is not None


@dataclass
class ImportReport:
    """Per-item results of a batch import, in input order."""
    results: list[ImportResult] = field(default_factory=list)

    @property
    def admitted(self) -> list[Attachment]:
        return [r.attachment for r in self.results if r.attachment is not None]

    @property
    def failures(self) -> list[ImportResult]:
        return [r for r in self.results if r.error is not None]

    @property
    def first_error_message(self) -> Optional[str]:
        """Message of the first failed item, for single-alert UIs."""
        failures = self.failures
        return failures[0].error.message if failures else None


@dataclass
class PasteBuffer:
    """Text being pasted. Cleared after a successful save or a cancel."""
    text: str = ""

    def clear(self) -> None:
        self.text = ""


class Ingestor:
    """
    Drives imports into a space.

    Args:
        storage: Attachment directory manager
        store: Record store
        gate: Language gate
        sampler: Text sampler
        access: Source access policy (defaults to UnrestrictedAccess)
    """

    def __init__(
        self,
        storage: AttachmentStorage,
        store: SpaceStoreProtocol,
        gate: LanguageGate,
        sampler: Optional[TextSampler] = None,
        access: Optional[SourceAccess] = None,
    ):
        self.storage = storage
        self.store = store
        self.gate = gate
        self.sampler = sampler or TextSampler()
        self.access = access or UnrestrictedAccess()

    # -------------------------------------------------------------------------
    # File imports
    # -------------------------------------------------------------------------

    def import_files(
        self,
        sources: Iterable[Source],
        space: Space,
        declared_types: Optional[dict[str, str]] = None,
    ) -> ImportReport:
        """
        Import files into a space, each item independently.

        A failure of one item, expected or not, is recorded in the report
        and the batch moves on to the next source.

        Args:
            sources: Paths of the files to import
            space: Owning space
            declared_types: Optional content type per source (keyed by str(path))

        Returns:
            ImportReport with one result per source

        Raises:
            DirectoryError: If the attachment directory can't be prepared
        """
        self.storage.ensure_directory()
        declared_types = declared_types or {}

        report = ImportReport()
        for source in sources:
            path = Path(source)
            try:
                attachment = self.import_file(path, space, declared_types.get(str(source)))
            except IngestError as e:
                logger.info("Import of %s failed: %s", path.name, e.message)
                report.results.append(ImportResult(source=str(source), error=e))
            except Exception as e:
                logger.warning("Import of %s failed unexpectedly: %s", path.name, e, exc_info=True)
                report.results.append(
                    ImportResult(source=str(source), error=ImportFailed(path.name, e))
                )
            else:
                report.results.append(ImportResult(source=str(source), attachment=attachment))
        return report

    def import_file(
        self,
        source: Path,
        space: Space,
        declared_type: Optional[str] = None,
    ) -> Attachment:
        """
        Import a single file. The attachment directory must already exist.

        Raises:
            UnsupportedContainer: No content family for the source
            CopyError: The copy into the attachment directory failed
            ExtractionFailed: No text sample could be taken
            LanguageUnsupported: The sample is not in the supported language
            PersistError: The record could not be stored
        """
        source = Path(source)
        with scoped_access(self.access, source):
            family = classify(source, declared_type)
            if family is ContentFamily.UNSUPPORTED:
                raise UnsupportedContainer(source.name)

            stored_name = self.storage.new_stored_name(source.name)
            try:
                destination = self.storage.copy_in(source, stored_name)
            except OSError as e:
                raise CopyError(source.name, e) from e

            try:
                sample = self.sampler.sample(destination, family)
                if sample is None:
                    raise ExtractionFailed(source.name)
                language = self.gate.admit(sample, source=source.name)
                attachment = Attachment(
                    original_file_name=source.name,
                    stored_file_name=stored_name,
                    language_code=language,
                )
                self._persist(attachment, space)
            except Exception:
                self._discard(stored_name)
                raise

        logger.info("Imported %s into %s as %s", source.name, space.name, stored_name)
        return attachment

    # -------------------------------------------------------------------------
    # Pasted text
    # -------------------------------------------------------------------------

    def import_pasted_text(self, text: str, space: Space) -> Attachment:
        """
        Save pasted text as an attachment.

        The trimmed text is gated directly; it is written to disk only
        once admitted.

        Raises:
            EmptyText: The text is empty after trimming (disk untouched)
            DirectoryError: The attachment directory can't be prepared
            LanguageUnsupported: The text is not in the supported language
            CopyError: The text could not be written
            PersistError: The record could not be stored
        """
        trimmed = text.strip()
        if not trimmed:
            raise EmptyText()

        self.storage.ensure_directory()
        language = self.gate.admit(trimmed, source=PASTED_DISPLAY_NAME)

        stored_name = self.storage.new_stored_name()
        try:
            self.storage.write_text(stored_name, trimmed)
        except OSError as e:
            raise CopyError(PASTED_DISPLAY_NAME, e) from e

        attachment = Attachment(
            original_file_name=PASTED_DISPLAY_NAME,
            stored_file_name=stored_name,
            language_code=language,
        )
        try:
            self._persist(attachment, space)
        except Exception:
            self._discard(stored_name)
            raise

        logger.info("Saved pasted text into %s as %s", space.name, stored_name)
        return attachment

    def save_paste_buffer(self, buffer: PasteBuffer, space: Space) -> Attachment:
        """Save the buffer's text; the buffer is cleared only on success."""
        attachment = self.import_pasted_text(buffer.text, space)
        buffer.clear()
        return attachment

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _persist(self, attachment: Attachment, space: Space) -> None:
        """Attach to the owning space and insert the record."""
        space.attach(attachment)
        try:
            self.store.insert_attachment(attachment)
        except Exception as e:
            space.detach(attachment)
            raise PersistError(attachment.original_file_name, e) from e

    def _discard(self, stored_name: str) -> None:
        """Remove a file written for an item that was not admitted."""
        try:
            self.storage.remove(stored_name)
        except OSError as e:
            logger.warning("Could not remove rejected file %s: %s", stored_name, e)
