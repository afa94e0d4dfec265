"""JSON file store: one file per collection in a data directory."""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from .base_store import BaseStore, Collection, Record
from ..utils.exceptions import StorageError


class JSONFileStore(BaseStore):
    """
    Store each collection as ``<data_dir>/<key>.json``.

    Saves write a temp file next to the target and ``os.replace`` it into
    place, so a reader sees either the previous or the new collection.
    """

    def __init__(self, data_dir: Union[str, Path], indent: Optional[int] = 2):
        """
        Initialize JSON store.

        Args:
            data_dir: Directory holding the collection files (created if missing)
            indent: JSON indentation, None for compact output
        """
        super().__init__()
        self.data_dir = Path(data_dir)
        self.indent = indent
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / f"{collection.value}.json"

    def _read(self, collection: Collection) -> List[Record]:
        path = self.path_for(collection)
        if not path.exists():
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            self.logger.error(f"Failed reading {path}: {str(e)}")
            raise StorageError(f"Cannot read {collection.value}", details={"path": str(path)}) from e

        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self.logger.error(f"Corrupt JSON in {path}: {str(e)}")
            raise StorageError(f"Corrupt data in {collection.value}", details={"path": str(path)}) from e

        if not isinstance(data, list):
            raise StorageError(
                f"Expected a list of records in {collection.value}",
                details={"path": str(path), "type": type(data).__name__}
            )

        return data

    def _write(self, collection: Collection, records: List[Record]) -> None:
        path = self.path_for(collection)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{collection.value}.", suffix=".tmp", dir=self.data_dir)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Failed writing {path}: {str(e)}")
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot save {collection.value}", details={"path": str(path)}) from e
