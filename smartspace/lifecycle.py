"""
Deletion of attachments and spaces.

Files are removed before records. A file that can't be removed never
blocks removal of its record; the failure is logged and reported so the
orphaned file is visible rather than silently left behind.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .protocol import SpaceStoreProtocol
from .storage import AttachmentStorage
from .types import Attachment, Space

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    """What a delete operation removed and what went wrong along the way."""
    removed: list[Attachment] = field(default_factory=list)
    errors: list[tuple[Attachment, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error_message(self) -> Optional[str]:
        return str(self.errors[0][1]) if self.errors else None


class AttachmentLifecycle:
    """
    Removes attachments and spaces together with their stored files.
    """

    def __init__(self, storage: AttachmentStorage, store: SpaceStoreProtocol):
        self.storage = storage
        self.store = store

    def _remove_file(self, attachment: Attachment, report: DeletionReport) -> None:
        try:
            self.storage.remove(attachment.stored_file_name)
        except (OSError, ValueError) as e:
            logger.warning(
                "Could not remove file %s for %s: %s",
                attachment.stored_file_name, attachment.original_file_name, e,
            )
            report.errors.append((attachment, e))

    def delete_attachment(self, attachment: Attachment) -> DeletionReport:
        """Remove an attachment's file (best-effort), then its record."""
        report = DeletionReport()
        self._remove_file(attachment, report)
        self.store.delete_attachment(attachment)
        report.removed.append(attachment)
        logger.info("Deleted attachment %s", attachment.stored_file_name)
        return report

    def delete_attachments(self, attachments: Iterable[Attachment]) -> DeletionReport:
        """Delete each attachment independently; one failure doesn't stop the rest."""
        report = DeletionReport()
        for attachment in list(attachments):
            try:
                single = self.delete_attachment(attachment)
            except Exception as e:
                logger.warning("Could not delete record %s: %s", attachment.id, e)
                report.errors.append((attachment, e))
                continue
            report.removed.extend(single.removed)
            report.errors.extend(single.errors)
        return report

    def delete_space(self, space: Space) -> DeletionReport:
        """
        Delete a space and everything it owns.

        Every attachment file is removed best-effort, then the space record
        is deleted, which removes its attachment records with it.
        """
        report = DeletionReport()
        # The store is authoritative; the Space may have been loaded without children
        attachments = self.store.list_attachments(space.id)
        for attachment in attachments:
            self._remove_file(attachment, report)
        self.store.delete_space(space)
        report.removed.extend(attachments)
        logger.info(
            "Deleted space %s with %d attachment(s)", space.name, len(attachments)
        )
        return report
