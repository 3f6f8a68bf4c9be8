"""
On-disk attachment storage.

All attachment bytes live in one flat directory under the store root.
Each file is keyed by a stored name built from a fresh random identifier,
so the user-visible file name never has to be unique.
"""

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from .config import ATTACHMENTS_DIRNAME, PASTED_SUFFIX
from .errors import DirectoryError

logger = logging.getLogger(__name__)

# Marks the directory as excluded from backups (see https://bford.info/cachedir/)
BACKUP_EXCLUSION_TAG = "CACHEDIR.TAG"
BACKUP_EXCLUSION_CONTENT = (
    "Signature: 8a477f597d28d172789f06886806bc55\n"
    "# This directory holds smartspace attachments.\n"
    "# Backup tools that honour cache directory tags will skip it.\n"
)


class AttachmentStorage:
    """
    Owns the attachment directory: naming, path mapping, writes and removal.

    The root is passed in explicitly; nothing here consults ambient
    platform state.
    """

    def __init__(self, root: Path):
        self.directory = Path(root) / ATTACHMENTS_DIRNAME

    def ensure_directory(self) -> Path:
        """Create the attachment directory if absent and exclude it from backup.

        Idempotent. Raises DirectoryError if the directory cannot be prepared.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tag = self.directory / BACKUP_EXCLUSION_TAG
            if not tag.exists():
                tag.write_text(BACKUP_EXCLUSION_CONTENT, encoding="utf-8")
                logger.debug("Created attachment directory %s", self.directory)
        except OSError as e:
            raise DirectoryError(self.directory, e) from e
        return self.directory

    @staticmethod
    def new_stored_name(original_file_name: Optional[str] = None) -> str:
        """Collision-resistant stored name.

        File imports keep the last path component of the original name;
        pasted text (no original name) gets the fixed pasted suffix.
        """
        identifier = str(uuid.uuid4()).upper()
        if original_file_name is None:
            return f"{identifier}{PASTED_SUFFIX}"
        return f"{identifier}-{Path(original_file_name).name}"

    def path_for(self, stored_file_name: str) -> Path:
        """Map a stored name to its path. No I/O."""
        if not stored_file_name or Path(stored_file_name).name != stored_file_name:
            raise ValueError(f"Invalid stored file name: {stored_file_name!r}")
        return self.directory / stored_file_name

    def exists(self, stored_file_name: str) -> bool:
        return self.path_for(stored_file_name).is_file()

    def remove(self, stored_file_name: str) -> None:
        """Delete a stored file. Already absent is not an error."""
        self.path_for(stored_file_name).unlink(missing_ok=True)

    def copy_in(self, source: Path, stored_file_name: str) -> Path:
        """Copy a source file to its stored location, replacing any file there.

        Raises OSError on copy failure; no partial file is left behind.
        """
        destination = self.path_for(stored_file_name)
        if destination.exists():
            logger.warning("Stored name %s already exists, replacing", stored_file_name)
            destination.unlink()
        try:
            shutil.copy2(source, destination)
        except OSError:
            destination.unlink(missing_ok=True)
            raise
        return destination

    def write_text(self, stored_file_name: str, text: str) -> Path:
        """Write UTF-8 text atomically to its stored location."""
        destination = self.path_for(stored_file_name)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, destination)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return destination
