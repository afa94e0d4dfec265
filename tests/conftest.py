"""Pytest configuration and fixtures."""

import time
from typing import Iterable

import pytest

from stockbook.services.inventory_service import InventoryService
from stockbook.storage.base_store import Collection
from stockbook.storage.memory_store import MemoryStore
from stockbook.utils.exceptions import StorageError
from stockbook.utils.logger import (
    get_api_logger,
    get_error_logger,
    get_inventory_logger,
    get_storage_logger,
)


class FailingStore(MemoryStore):
    """MemoryStore whose writes to selected collections fail."""

    def __init__(self, fail_on: Iterable[Collection] = ()):
        super().__init__()
        self.fail_on = set(fail_on)

    def _write(self, collection, records):
        if collection in self.fail_on:
            raise StorageError(f"Simulated write failure for {collection.value}")
        super()._write(collection, records)


class SlowStore(MemoryStore):
    """MemoryStore that pauses on every write, widening any race between requests."""

    def __init__(self, delay: float = 0.05):
        super().__init__()
        self.delay = delay

    def _write(self, collection, records):
        time.sleep(self.delay)
        super()._write(collection, records)


@pytest.fixture(scope="session", autouse=True)
def configure_loggers():
    """Create handlers once so they bind to the session's stderr."""
    for factory in (get_inventory_logger, get_storage_logger, get_error_logger, get_api_logger):
        factory()


@pytest.fixture
def memory_store():
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def inventory(memory_store):
    """Create an InventoryService over an empty in-memory store."""
    return InventoryService(store=memory_store)


@pytest.fixture
def widget(inventory):
    """Create a product with no stock."""
    return inventory.create_product("Widget", "Hardware", "piece", 10.0)


@pytest.fixture
def stocked_widget(inventory, widget):
    """Create a product with 20 units at an average cost of 5.00."""
    inventory.add_stock(widget.id, 10, 4.0)
    inventory.add_stock(widget.id, 10, 6.0)
    return inventory.get_product(widget.id)


@pytest.fixture
def failing_store_factory():
    """Build a FailingStore for the given collections."""
    return FailingStore


@pytest.fixture
def slow_store():
    """Create an in-memory store with slow writes."""
    return SlowStore()
