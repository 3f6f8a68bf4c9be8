"""
Space store using SQLite.

The store is the source of truth for:
- Space identity, name, type and mode
- Block and attachment records and their owning space
- Timestamps

Attachment bytes are not stored here; see storage.AttachmentStorage.
Foreign keys are enforced so that deleting a space removes its blocks
and attachments in the same statement.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from .config import SPACE_NAME_LIMIT
from .errors import DuplicateSpaceName
from .types import (
    Attachment,
    BlockKind,
    Space,
    SpaceBlock,
    SpaceMode,
    SpaceType,
    space_name_key,
)

logger = logging.getLogger(__name__)


class SpaceStore:
    """
    SQLite-backed store for spaces, blocks and attachment records.
    """

    def __init__(self, store_path: Path):
        """
        Args:
            store_path: Path to SQLite database file
        """
        self._db_path = Path(store_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the SQLite database."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS spaces (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL UNIQUE,
                type TEXT NOT NULL,
                mode TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS blocks (
                id TEXT PRIMARY KEY,
                space_id TEXT NOT NULL REFERENCES spaces(id) ON DELETE CASCADE,
                title TEXT NOT NULL,
                kind TEXT NOT NULL,
                details TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL
            )
        """)

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS attachments (
                id TEXT PRIMARY KEY,
                space_id TEXT NOT NULL REFERENCES spaces(id) ON DELETE CASCADE,
                original_file_name TEXT NOT NULL,
                stored_file_name TEXT NOT NULL UNIQUE,
                language_code TEXT,
                added_at TEXT NOT NULL
            )
        """)

        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_attachments_space
            ON attachments(space_id)
        """)

        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_blocks_space
            ON blocks(space_id)
        """)

        self._conn.commit()

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def create_space(
        self,
        name: str,
        type: SpaceType = SpaceType.LEARNING,
        mode: SpaceMode = SpaceMode.PRIVATE_CLOUD_COMPUTE,
    ) -> Space:
        """
        Create and store a new space.

        The name is trimmed and cut to SPACE_NAME_LIMIT characters.

        Raises:
            ValueError: If the name is empty
            DuplicateSpaceName: If a space with an equivalent name exists
        """
        trimmed = name.strip()[:SPACE_NAME_LIMIT].strip()
        if not trimmed:
            raise ValueError("Space name cannot be empty")
        return self.insert_space(Space(name=trimmed, type=type, mode=mode))

    def insert_space(self, space: Space) -> Space:
        """Insert a space record. Raises DuplicateSpaceName on a name clash."""
        try:
            self._conn.execute("""
                INSERT INTO spaces (id, name, name_key, type, mode, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                space.id, space.name, space_name_key(space.name),
                space.type.value, space.mode.value, space.created_at,
            ))
            self._conn.commit()
        except sqlite3.IntegrityError as e:
            self._conn.rollback()
            if self.find_space_by_name(space.name) is not None:
                raise DuplicateSpaceName(
                    f"A space named '{space.name}' already exists"
                ) from e
            raise
        logger.info("Created space %s (%s)", space.name, space.id)
        return space

    def insert_attachment(self, attachment: Attachment) -> Attachment:
        """
        Insert an attachment record.

        The attachment must already be attached to its owning space.

        Raises:
            ValueError: If the attachment has no owning space
            sqlite3.IntegrityError: If the space doesn't exist or the stored
                name is already used
        """
        if attachment.space_id is None:
            raise ValueError(
                f"Attachment {attachment.stored_file_name} has no owning space"
            )
        try:
            self._conn.execute("""
                INSERT INTO attachments
                (id, space_id, original_file_name, stored_file_name, language_code, added_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                attachment.id, attachment.space_id, attachment.original_file_name,
                attachment.stored_file_name, attachment.language_code, attachment.added_at,
            ))
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise
        return attachment

    def delete_attachment(self, attachment: Attachment) -> bool:
        """
        Delete an attachment record and unlink it from its space.

        Returns:
            True if a record was deleted, False if it didn't exist
        """
        cursor = self._conn.execute(
            "DELETE FROM attachments WHERE id = ?", (attachment.id,)
        )
        self._conn.commit()
        if attachment.space is not None:
            attachment.space.detach(attachment)
        return cursor.rowcount > 0

    def delete_space(self, space: Space) -> bool:
        """
        Delete a space; its blocks and attachment records go with it.

        Returns:
            True if the space was deleted, False if it didn't exist
        """
        cursor = self._conn.execute("DELETE FROM spaces WHERE id = ?", (space.id,))
        self._conn.commit()
        for attachment in list(space.attachments):
            space.detach(attachment)
        space.blocks = []
        return cursor.rowcount > 0

    def add_block(
        self,
        space: Space,
        title: str,
        kind: BlockKind,
        details: str = "",
    ) -> SpaceBlock:
        """Add a content block to a space."""
        block = SpaceBlock(title=title, kind=kind, details=details, space_id=space.id)
        self._conn.execute("""
            INSERT INTO blocks (id, space_id, title, kind, details, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (block.id, space.id, block.title, block.kind.value, block.details, block.created_at))
        self._conn.commit()
        space.blocks.append(block)
        return block

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def _space_from_row(self, row: sqlite3.Row, *, with_children: bool = True) -> Space:
        space = Space(
            id=row["id"],
            name=row["name"],
            type=SpaceType(row["type"]),
            mode=SpaceMode(row["mode"]),
            created_at=row["created_at"],
        )
        if with_children:
            for attachment in self.list_attachments(space.id):
                space.attach(attachment)
            space.blocks = self.list_blocks(space.id)
        return space

    def get_space(self, space_id: str) -> Optional[Space]:
        """Get a space with its blocks and attachments populated."""
        row = self._conn.execute(
            "SELECT * FROM spaces WHERE id = ?", (space_id,)
        ).fetchone()
        return self._space_from_row(row) if row else None

    def find_space_by_name(self, name: str) -> Optional[Space]:
        """Look up a space by name, ignoring case and diacritics."""
        row = self._conn.execute(
            "SELECT * FROM spaces WHERE name_key = ?", (space_name_key(name),)
        ).fetchone()
        return self._space_from_row(row) if row else None

    def list_spaces(self) -> list[Space]:
        """All spaces, newest first, without their children loaded."""
        rows = self._conn.execute(
            "SELECT * FROM spaces ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [self._space_from_row(row, with_children=False) for row in rows]

    def list_attachments(self, space_id: str) -> list[Attachment]:
        """Attachment records of a space, newest first (not linked to a Space)."""
        rows = self._conn.execute("""
            SELECT * FROM attachments WHERE space_id = ?
            ORDER BY added_at DESC, rowid DESC
        """, (space_id,)).fetchall()
        return [
            Attachment(
                id=row["id"],
                original_file_name=row["original_file_name"],
                stored_file_name=row["stored_file_name"],
                language_code=row["language_code"],
                added_at=row["added_at"],
            )
            for row in rows
        ]

    def list_blocks(self, space_id: str) -> list[SpaceBlock]:
        rows = self._conn.execute("""
            SELECT * FROM blocks WHERE space_id = ?
            ORDER BY created_at, rowid
        """, (space_id,)).fetchall()
        return [
            SpaceBlock(
                id=row["id"],
                space_id=row["space_id"],
                title=row["title"],
                kind=BlockKind(row["kind"]),
                details=row["details"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def count_attachments(self) -> int:
        """Total attachment records across all spaces."""
        return self._conn.execute("SELECT COUNT(*) FROM attachments").fetchone()[0]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
