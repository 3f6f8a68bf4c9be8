"""Tests for the SQLite space store."""

import sqlite3

import pytest

from smartspace.errors import DuplicateSpaceName
from smartspace.protocol import SpaceStoreProtocol
from smartspace.space_store import SpaceStore
from smartspace.types import Attachment, BlockKind, Space, SpaceMode, SpaceType


def _attachment(space: Space, name: str, added_at: str) -> Attachment:
    attachment = Attachment(
        original_file_name=name,
        stored_file_name=f"ID-{name}",
        language_code="en",
        added_at=added_at,
    )
    space.attach(attachment)
    return attachment


class TestSpaces:

    def test_satisfies_protocol(self, store):
        assert isinstance(store, SpaceStoreProtocol)

    def test_defaults(self, store):
        space = store.create_space("Reading")
        assert space.type is SpaceType.LEARNING
        assert space.mode is SpaceMode.PRIVATE_CLOUD_COMPUTE

    def test_round_trip(self, store):
        created = store.create_space("Work notes", type=SpaceType.WORK, mode=SpaceMode.ON_DEVICE)

        loaded = store.find_space_by_name("work notes")

        assert loaded.id == created.id
        assert loaded.name == "Work notes"
        assert loaded.type is SpaceType.WORK
        assert loaded.mode is SpaceMode.ON_DEVICE

    @pytest.mark.parametrize("clash", ["cafe", "CAFÉ", "  Café  ", "Café"])
    def test_duplicate_ignores_case_and_diacritics(self, store, clash):
        store.create_space("Café")
        with pytest.raises(DuplicateSpaceName):
            store.create_space(clash)

    def test_name_trimmed_and_truncated(self, store):
        space = store.create_space("  " + "x" * 40 + "  ")
        assert space.name == "x" * 24

    @pytest.mark.parametrize("name", ["", "    "])
    def test_empty_name_rejected(self, store, name):
        with pytest.raises(ValueError):
            store.create_space(name)

    def test_list_newest_first(self, store):
        older = store.insert_space(Space(name="Older", created_at="2024-01-01T00:00:00"))
        newer = store.insert_space(Space(name="Newer", created_at="2024-06-01T00:00:00"))

        assert [s.id for s in store.list_spaces()] == [newer.id, older.id]

    def test_persists_across_connections(self, tmp_path):
        db = tmp_path / "spaces.db"
        first = SpaceStore(db)
        first.create_space("Kept")
        first.close()

        second = SpaceStore(db)
        try:
            assert second.find_space_by_name("kept") is not None
        finally:
            second.close()


class TestAttachments:

    def test_get_space_links_both_sides(self, store, space):
        store.insert_attachment(_attachment(space, "a.txt", "2024-01-01T00:00:00"))

        loaded = store.get_space(space.id)

        assert len(loaded.attachments) == 1
        assert loaded.attachments[0].space is loaded
        assert loaded.attachments[0].space_id == space.id

    def test_listed_newest_first(self, store, space):
        store.insert_attachment(_attachment(space, "old.txt", "2024-01-01T00:00:00"))
        store.insert_attachment(_attachment(space, "new.txt", "2024-03-01T00:00:00"))
        store.insert_attachment(_attachment(space, "mid.txt", "2024-02-01T00:00:00"))

        names = [a.original_file_name for a in store.list_attachments(space.id)]

        assert names == ["new.txt", "mid.txt", "old.txt"]
        assert [a.original_file_name for a in space.sorted_attachments()] == names

    def test_unknown_language_kept_as_none(self, store, space):
        attachment = _attachment(space, "a.txt", "2024-01-01T00:00:00")
        attachment.language_code = None
        store.insert_attachment(attachment)

        assert store.list_attachments(space.id)[0].language_code is None

    def test_insert_requires_owner(self, store):
        orphan = Attachment(original_file_name="a.txt", stored_file_name="ID-a.txt")
        with pytest.raises(ValueError):
            store.insert_attachment(orphan)

    def test_insert_for_unknown_space_fails(self, store):
        ghost = Space(name="Ghost")
        with pytest.raises(sqlite3.IntegrityError):
            store.insert_attachment(_attachment(ghost, "a.txt", "2024-01-01T00:00:00"))

    def test_delete_attachment_detaches(self, store, space):
        attachment = _attachment(space, "a.txt", "2024-01-01T00:00:00")
        store.insert_attachment(attachment)

        assert store.delete_attachment(attachment) is True

        assert space.attachments == []
        assert attachment.space is None
        assert store.delete_attachment(attachment) is False


class TestCascade:

    def test_delete_space_removes_children(self, store, space):
        store.insert_attachment(_attachment(space, "a.txt", "2024-01-01T00:00:00"))
        store.insert_attachment(_attachment(space, "b.txt", "2024-01-02T00:00:00"))
        store.add_block(space, "Summary", BlockKind.SUMMARY, "Short summary")
        other = store.create_space("Other")
        store.insert_attachment(_attachment(other, "c.txt", "2024-01-03T00:00:00"))

        assert store.delete_space(space) is True

        assert store.list_attachments(space.id) == []
        assert store.list_blocks(space.id) == []
        assert space.attachments == []
        assert store.count_attachments() == 1


class TestBlocks:

    def test_add_and_load(self, store, space):
        block = store.add_block(space, "Why?", BlockKind.QUESTION, "Open question")

        loaded = store.get_space(space.id)

        assert space.blocks == [block]
        assert loaded.blocks[0].title == "Why?"
        assert loaded.blocks[0].kind is BlockKind.QUESTION
        assert loaded.blocks[0].space_id == space.id
