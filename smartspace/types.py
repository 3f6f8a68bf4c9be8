"""
Data types for spaces and their attachments.
"""

import unicodedata
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utc_now() -> str:
    """Current UTC timestamp in canonical format: YYYY-MM-DDTHH:MM:SS.

    All timestamps are UTC, stored without timezone suffix.
    """
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def new_id() -> str:
    """Fresh random identifier for a record."""
    return str(uuid.uuid4())


def space_name_key(name: str) -> str:
    """Comparison key for space names: case- and diacritic-insensitive.

    "Café", "cafe" and "CAFÉ" all map to the same key.
    """
    decomposed = unicodedata.normalize("NFKD", name.strip())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class SpaceType(str, Enum):
    LEARNING = "Learning"
    WORK = "Work"
    PERSONAL = "Personal"


class SpaceMode(str, Enum):
    """Where the space's processing runs."""
    PRIVATE_CLOUD_COMPUTE = "Private Cloud Compute"
    ON_DEVICE = "On-device"


class BlockKind(str, Enum):
    NOTE = "Note"
    SUMMARY = "Summary"
    QUESTION = "Question"


class ContentFamily(Enum):
    """Coarse format classification that drives sampling."""
    PLAIN_TEXT = "plain-text"
    PDF = "pdf"
    WORD_DOCUMENT = "word-document"
    UNSUPPORTED = "unsupported"


@dataclass
class SpaceBlock:
    """A unit of content inside a space."""
    title: str
    kind: BlockKind
    details: str = ""
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now)
    space_id: Optional[str] = None


@dataclass
class Attachment:
    """
    One imported file or saved pasted-text item.

    Attributes:
        original_file_name: User-facing name, display only
        stored_file_name: On-disk key under the attachments directory
        language_code: Detected language tag (None means unknown)
        added_at: UTC timestamp when the attachment was admitted
        space: Owning space; set once the attachment is attached
    """
    original_file_name: str
    stored_file_name: str
    language_code: Optional[str] = None
    id: str = field(default_factory=new_id)
    added_at: str = field(default_factory=utc_now)
    space: Optional["Space"] = field(default=None, repr=False, compare=False)

    @property
    def space_id(self) -> Optional[str]:
        return self.space.id if self.space is not None else None


@dataclass
class Space:
    """
    A named collection of blocks and attachments.

    The space is the owning side of the attachment relationship: an
    attachment is added through attach() and never outlives its space.
    """
    name: str
    type: SpaceType = SpaceType.LEARNING
    mode: SpaceMode = SpaceMode.PRIVATE_CLOUD_COMPUTE
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now)
    blocks: list[SpaceBlock] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)

    def attach(self, attachment: Attachment) -> None:
        """Link an attachment to this space (both sides of the relationship)."""
        attachment.space = self
        if all(a.id != attachment.id for a in self.attachments):
            self.attachments.append(attachment)

    def detach(self, attachment: Attachment) -> None:
        """Unlink an attachment; no-op if it is not held by this space."""
        self.attachments = [a for a in self.attachments if a.id != attachment.id]
        if attachment.space is self:
            attachment.space = None

    def sorted_attachments(self) -> list[Attachment]:
        """Attachments newest first."""
        return sorted(self.attachments, key=lambda a: a.added_at, reverse=True)
