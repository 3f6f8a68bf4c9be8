"""
Public API: spaces with language-gated attachments.

Example:
    with SmartSpace("~/.smartspace") as ss:
        space = ss.create_space("Reading list")
        report = ss.import_files(["/tmp/essay.pdf"], space)
        ss.delete_space(space)
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from .config import StoreConfig, get_default_store_path, load_or_create_config
from .gate import LanguageGate
from .ingest import Ingestor, ImportReport, PasteBuffer, Source, SourceAccess
from .lifecycle import AttachmentLifecycle, DeletionReport
from .logging_config import configure_ops_log, remove_ops_log
from .protocol import SpaceStoreProtocol
from .providers.base import LanguageIdentifier, get_registry
from .providers.documents import TextSampler
from .space_store import SpaceStore
from .storage import AttachmentStorage
from .types import Attachment, BlockKind, Space, SpaceBlock, SpaceMode, SpaceType

logger = logging.getLogger(__name__)


class SmartSpace:
    """
    Spaces, their blocks, and their attachments under one store root.
    """

    def __init__(
        self,
        store_path: Optional[str | Path] = None,
        *,
        config: Optional[StoreConfig] = None,
        store: Optional[SpaceStoreProtocol] = None,
        identifier: Optional[LanguageIdentifier] = None,
        access: Optional[SourceAccess] = None,
    ) -> None:
        """
        Open (or create) a store.

        Args:
            store_path: Store root. Uses the default if not specified.
            config: Pre-loaded StoreConfig (skips config file discovery).
            store: Injected record store (skips default SQLite store).
            identifier: Injected language identifier (skips provider registry).
            access: Source access policy for file imports.
        """
        if config is not None:
            self._config = config
        else:
            root = Path(store_path).expanduser() if store_path is not None else get_default_store_path()
            self._config = load_or_create_config(root.resolve())
        self._store_path = self._config.path
        self._store_path.mkdir(parents=True, exist_ok=True)

        if identifier is None:
            identifier = get_registry().create_language(
                self._config.language.name,
                self._config.language.params,
            )

        self._store = store if store is not None else SpaceStore(self._config.database_path)
        self._storage = AttachmentStorage(self._store_path)
        self._ingestor = Ingestor(
            storage=self._storage,
            store=self._store,
            gate=LanguageGate(identifier),
            sampler=TextSampler(),
            access=access,
        )
        self._lifecycle = AttachmentLifecycle(self._storage, self._store)
        self.paste_buffer = PasteBuffer()

        # Must follow every step that can raise
        self._ops_log_handler = configure_ops_log(self._store_path)

    @property
    def store_path(self) -> Path:
        return self._store_path

    @property
    def storage(self) -> AttachmentStorage:
        return self._storage

    @property
    def store(self) -> SpaceStoreProtocol:
        return self._store

    # -- Spaces --

    def create_space(
        self,
        name: str,
        type: SpaceType = SpaceType.LEARNING,
        mode: SpaceMode = SpaceMode.PRIVATE_CLOUD_COMPUTE,
    ) -> Space:
        return self._store.create_space(name, type=type, mode=mode)

    def get_space(self, name: str) -> Optional[Space]:
        """Find a space by name (case- and diacritic-insensitive)."""
        return self._store.find_space_by_name(name)

    def list_spaces(self) -> list[Space]:
        return self._store.list_spaces()

    def add_block(self, space: Space, title: str, kind: BlockKind, details: str = "") -> SpaceBlock:
        return self._store.add_block(space, title, kind, details)

    # -- Imports --

    def import_files(
        self,
        sources: Iterable[Source],
        space: Space,
        declared_types: Optional[dict[str, str]] = None,
    ) -> ImportReport:
        return self._ingestor.import_files(sources, space, declared_types)

    def import_pasted_text(self, text: str, space: Space) -> Attachment:
        return self._ingestor.import_pasted_text(text, space)

    def save_paste(self, space: Space) -> Attachment:
        """Save the paste buffer into a space, clearing it on success."""
        return self._ingestor.save_paste_buffer(self.paste_buffer, space)

    def cancel_paste(self) -> None:
        self.paste_buffer.clear()

    # -- Deletion --

    def delete_attachment(self, attachment: Attachment) -> DeletionReport:
        return self._lifecycle.delete_attachment(attachment)

    def delete_attachments(self, attachments: Iterable[Attachment]) -> DeletionReport:
        return self._lifecycle.delete_attachments(attachments)

    def delete_space(self, space: Space) -> DeletionReport:
        return self._lifecycle.delete_space(space)

    # -- Files --

    def attachment_path(self, attachment: Attachment) -> Path:
        return self._storage.path_for(attachment.stored_file_name)

    def has_file(self, attachment: Attachment) -> bool:
        """Whether the attachment's backing file is present on disk."""
        return self._storage.exists(attachment.stored_file_name)

    def close(self) -> None:
        """Close the record store and detach the operations log."""
        if self._ops_log_handler is not None:
            remove_ops_log(self._ops_log_handler)
            self._ops_log_handler = None
        self._store.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close resources."""
        self.close()
        return False
