"""Base key-value store for the inventory collections."""

from enum import Enum
from typing import Any, Dict, List, Union

from ..utils.exceptions import StorageError
from ..utils.logger import get_storage_logger


class Collection(str, Enum):
    """The four logical keys the store is addressed by."""

    PRODUCTS = "products"
    CATEGORIES = "categories"
    STOCK_ENTRIES = "stock-entries"
    SALES = "sales"


Record = Dict[str, Any]


class BaseStore:
    """
    Blind record keeper: ``load`` and ``save`` whole collections.

    Subclasses implement ``_read`` and ``_write``. Records are plain dicts;
    the store never inspects their fields.
    """

    def __init__(self):
        self.logger = get_storage_logger()

    @staticmethod
    def resolve(collection: Union[Collection, str]) -> Collection:
        """Map a key to a known collection or raise StorageError."""
        try:
            return Collection(collection)
        except ValueError:
            raise StorageError(
                f"Unknown collection: {collection}",
                details={"collection": str(collection)}
            )

    def load(self, collection: Union[Collection, str]) -> List[Record]:
        """
        Load all records of a collection.

        Returns:
            List of records, empty if nothing is stored

        Raises:
            StorageError: If the key is unknown or stored data is unreadable
        """
        key = self.resolve(collection)
        records = self._read(key)
        self.logger.debug(f"Loaded {len(records)} record(s) from {key.value}")
        return records

    def save(self, collection: Union[Collection, str], records: List[Record]) -> None:
        """
        Replace a collection with ``records``.

        Raises:
            StorageError: If the key is unknown or the write fails
        """
        key = self.resolve(collection)
        self._write(key, list(records))
        self.logger.debug(f"Saved {len(records)} record(s) to {key.value}")

    def _read(self, collection: Collection) -> List[Record]:
        raise NotImplementedError

    def _write(self, collection: Collection, records: List[Record]) -> None:
        raise NotImplementedError

    def close(self):
        """Release any resources held by the store."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
