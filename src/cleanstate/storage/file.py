#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/storage/file.py
"""Directory-backed key-value store.

Each key is stored in its own UTF-8 file inside a directory. Writes go to a
temporary file in the same directory first and are moved into place with
:func:`os.replace`, so a reader never observes a partially written value.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from urllib.parse import quote

from cleanstate.exceptions import DeserializationError, StorageError
from cleanstate.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class FileStore(KeyValueStore):
    """Persist values as files under ``directory``.

    Parameters
    ----------
    directory : str or Path
        Directory holding one file per key; created on first write

    """

    def __init__(self, directory: str | Path) -> None:
        """Initialize the store for ``directory``."""
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path used for ``key``.

        Keys are percent-encoded so that any string maps to a single file name.
        """
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise DeserializationError(f"{path} is not valid UTF-8: {e}", original_error=e) from e
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}", key=key, operation="get", original_error=e) from e

    def copy(self, src: str, dst: str) -> None:
        """Copy the file for ``src`` byte for byte, so undecodable values survive."""
        src_path = self.path_for(src)
        dst_path = self.path_for(dst)
        try:
            shutil.copyfile(src_path, dst_path)
        except FileNotFoundError:
            # Both files share the directory, so the source is the missing one
            return
        except OSError as e:
            raise StorageError(
                f"Could not copy {src_path} to {dst_path}: {e}", key=dst, operation="copy", original_error=e
            ) from e
        logger.debug(f"Copied {src_path} to {dst_path}")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory, prefix=".tmp-", suffix=".json", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug(f"Wrote {len(value)} characters to {path}")
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}", key=key, operation="set", original_error=e) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {path}: {e}", key=key, operation="delete", original_error=e) from e


__all__ = ["FileStore"]
