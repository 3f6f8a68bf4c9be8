"""
Protocol definition for the record store behind spaces and attachments.

The ingestion and lifecycle code only constructs and mutates records;
persistence, relationships and queries belong to the store. SpaceStore
(SQLite) is the bundled implementation.
"""

from typing import Optional, Protocol, runtime_checkable

from .types import Attachment, BlockKind, Space, SpaceBlock, SpaceMode, SpaceType


@runtime_checkable
class SpaceStoreProtocol(Protocol):
    """
    Record store for spaces, blocks and attachments.

    Relationship contract: an attachment belongs to exactly one space;
    deleting a space deletes its attachment and block records.
    """

    # -- Write operations --

    def create_space(
        self,
        name: str,
        type: SpaceType = ...,
        mode: SpaceMode = ...,
    ) -> Space: ...

    def insert_space(self, space: Space) -> Space: ...

    def insert_attachment(self, attachment: Attachment) -> Attachment: ...

    def delete_attachment(self, attachment: Attachment) -> bool: ...

    def delete_space(self, space: Space) -> bool: ...

    def add_block(
        self,
        space: Space,
        title: str,
        kind: BlockKind,
        details: str = "",
    ) -> SpaceBlock: ...

    # -- Query operations --

    def get_space(self, space_id: str) -> Optional[Space]: ...

    def find_space_by_name(self, name: str) -> Optional[Space]: ...

    def list_spaces(self) -> list[Space]: ...

    def list_attachments(self, space_id: str) -> list[Attachment]: ...

    def close(self) -> None: ...
