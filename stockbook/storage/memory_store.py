"""In-process store, used for tests and throwaway sessions."""

import copy
from typing import Dict, List

from .base_store import BaseStore, Collection, Record


class MemoryStore(BaseStore):
    """Keeps collections in a dict. Nothing survives the process."""

    def __init__(self, initial: Dict[str, List[Record]] = None):
        super().__init__()
        self._data: Dict[Collection, List[Record]] = {}
        for key, records in (initial or {}).items():
            self._data[self.resolve(key)] = copy.deepcopy(records)

    def _read(self, collection: Collection) -> List[Record]:
        return copy.deepcopy(self._data.get(collection, []))

    def _write(self, collection: Collection, records: List[Record]) -> None:
        self._data[collection] = copy.deepcopy(records)
