"""Tests for the persistent store backends."""

import json

import pytest

from stockbook.models.category import Category
from stockbook.models.product import Product
from stockbook.models.sale import Sale
from stockbook.models.stock_entry import StockEntry
from stockbook.storage.base_store import Collection
from stockbook.storage.factory import create_store
from stockbook.storage.json_store import JSONFileStore
from stockbook.storage.memory_store import MemoryStore
from stockbook.utils.config import AppConfig
from stockbook.utils.exceptions import ConfigurationError, StorageError


def sample_records():
    product = Product(name="Widget", category="Hardware", unit="piece", price=10.0, stock=3, purchase_price=4.5)
    return {
        Collection.PRODUCTS: [product.to_dict()],
        Collection.CATEGORIES: [Category(name="Hardware", description="Tools").to_dict()],
        Collection.STOCK_ENTRIES: [StockEntry.create(product.id, 3, 4.5).to_dict()],
        Collection.SALES: [Sale.create(product.id, "Widget", 1, 10.0, 4.5).to_dict()],
    }


@pytest.fixture(params=["json", "memory"])
def store(request, tmp_path):
    if request.param == "json":
        return JSONFileStore(tmp_path / "data")
    return MemoryStore()


class TestStoreContract:
    """Behaviour shared by every backend."""

    def test_load_missing_collection_is_empty(self, store):
        for collection in Collection:
            assert store.load(collection) == []

    def test_round_trip_every_collection(self, store):
        """Test that saved records reload field-for-field."""
        records = sample_records()

        for collection, rows in records.items():
            store.save(collection, rows)

        for collection, rows in records.items():
            assert store.load(collection) == rows

    def test_round_trip_rebuilds_equal_models(self, store):
        records = sample_records()
        store.save(Collection.SALES, records[Collection.SALES])

        reloaded = [Sale.from_dict(r) for r in store.load(Collection.SALES)]

        assert reloaded == [Sale.from_dict(r) for r in records[Collection.SALES]]

    def test_save_overwrites_collection(self, store):
        store.save("products", [{"id": "a"}, {"id": "b"}])
        store.save("products", [{"id": "c"}])

        assert store.load("products") == [{"id": "c"}]

    def test_string_keys_are_accepted(self, store):
        store.save("stock-entries", [{"id": "e1"}])

        assert store.load(Collection.STOCK_ENTRIES) == [{"id": "e1"}]

    def test_unknown_collection_raises(self, store):
        with pytest.raises(StorageError, match="Unknown collection"):
            store.load("customers")

        with pytest.raises(StorageError, match="Unknown collection"):
            store.save("customers", [])


class TestJSONFileStore:
    """Tests for JSONFileStore specifics."""

    def test_files_are_named_after_keys(self, tmp_path):
        store = JSONFileStore(tmp_path)
        store.save(Collection.STOCK_ENTRIES, [{"id": "e1"}])

        path = tmp_path / "stock-entries.json"
        assert json.loads(path.read_text(encoding="utf-8")) == [{"id": "e1"}]

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JSONFileStore(tmp_path)
        store.save(Collection.PRODUCTS, [{"id": "p1"}])

        assert sorted(p.name for p in tmp_path.iterdir()) == ["products.json"]

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        (tmp_path / "products.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError, match="Corrupt data"):
            JSONFileStore(tmp_path).load(Collection.PRODUCTS)

    def test_non_list_payload_raises_storage_error(self, tmp_path):
        (tmp_path / "sales.json").write_text('{"id": "s1"}', encoding="utf-8")

        with pytest.raises(StorageError, match="Expected a list"):
            JSONFileStore(tmp_path).load(Collection.SALES)

    def test_blank_file_is_empty(self, tmp_path):
        (tmp_path / "categories.json").write_text("  \n", encoding="utf-8")

        assert JSONFileStore(tmp_path).load(Collection.CATEGORIES) == []

    def test_unserialisable_record_keeps_previous_file(self, tmp_path):
        """Test that a failed write leaves the stored collection intact."""
        store = JSONFileStore(tmp_path)
        store.save(Collection.PRODUCTS, [{"id": "p1"}])

        with pytest.raises(StorageError, match="Cannot save"):
            store.save(Collection.PRODUCTS, [{"id": object()}])

        assert store.load(Collection.PRODUCTS) == [{"id": "p1"}]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["products.json"]

    def test_creates_data_directory(self, tmp_path):
        target = tmp_path / "nested" / "data"

        with JSONFileStore(target) as store:
            store.save(Collection.PRODUCTS, [])

        assert (target / "products.json").exists()


class TestMemoryStore:
    """Tests for MemoryStore specifics."""

    def test_loaded_records_are_copies(self):
        store = MemoryStore()
        store.save(Collection.PRODUCTS, [{"id": "p1", "stock": 1}])

        store.load(Collection.PRODUCTS)[0]["stock"] = 99

        assert store.load(Collection.PRODUCTS) == [{"id": "p1", "stock": 1}]

    def test_initial_data(self):
        store = MemoryStore({"categories": [{"id": "c1", "name": "Hardware"}]})

        assert store.load(Collection.CATEGORIES) == [{"id": "c1", "name": "Hardware"}]


class TestCreateStore:
    """Tests for the backend factory."""

    def test_json_backend(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATA_DIR", str(tmp_path / "store"))
        monkeypatch.setenv("STORAGE_BACKEND", "json")

        store = create_store(AppConfig())

        assert isinstance(store, JSONFileStore)
        assert store.data_dir == tmp_path / "store"

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")

        assert isinstance(create_store(AppConfig()), MemoryStore)

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "redis")

        with pytest.raises(ConfigurationError, match="Unknown storage backend"):
            create_store(AppConfig())
