"""Tests for the command-line interface."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from stockbook.cli import cli
from stockbook.storage.base_store import Collection
from stockbook.storage.json_store import JSONFileStore

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path):
    """Run the CLI against a temporary data directory."""
    def _invoke(*args):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args])
    return _invoke


@pytest.fixture
def stored(tmp_path):
    """Read a collection straight from the data directory."""
    def _load(collection):
        return JSONFileStore(tmp_path).load(collection)
    return _load


@pytest.fixture
def product_id(invoke, stored):
    result = invoke("product", "add", "Widget", "--category", "Hardware", "--price", "10")
    assert result.exit_code == 0
    return stored(Collection.PRODUCTS)[0]["id"]


class TestProductCommands:
    """Tests for the product command group."""

    def test_add_product(self, invoke, stored):
        result = invoke("product", "add", "Widget", "--category", "Hardware", "--price", "10")

        assert result.exit_code == 0
        assert "Created product Widget" in result.output
        records = stored(Collection.PRODUCTS)
        assert records[0]["name"] == "Widget"
        assert records[0]["unit"] == "piece"
        assert records[0]["stock"] == 0

    def test_add_product_rejects_negative_price(self, invoke, stored):
        result = invoke("product", "add", "Widget", "--price", "-1")

        assert result.exit_code == 1
        assert "non-negative" in result.output
        assert stored(Collection.PRODUCTS) == []

    def test_list_products_with_search(self, invoke, product_id):
        invoke("product", "add", "Paint", "--category", "Decor", "--price", "4")

        result = invoke("product", "list", "--search", "hard")

        assert result.exit_code == 0
        assert "Widget" in result.output
        assert "Paint" not in result.output

    def test_update_product(self, invoke, stored, product_id):
        result = invoke("product", "update", product_id, "--price", "12.5")

        assert result.exit_code == 0
        assert stored(Collection.PRODUCTS)[0]["price"] == 12.5

    def test_update_unknown_product(self, invoke):
        result = invoke("product", "update", "missing", "--name", "X")

        assert result.exit_code == 1
        assert "Product not found" in result.output

    def test_update_without_fields(self, invoke, product_id):
        result = invoke("product", "update", product_id)

        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_delete_product(self, invoke, stored, product_id):
        result = invoke("product", "delete", product_id)

        assert result.exit_code == 0
        assert stored(Collection.PRODUCTS) == []

    def test_malformed_data_file_reports_error(self, invoke, tmp_path):
        (tmp_path / "products.json").write_text('[{"name": "Widget"}]')

        result = invoke("product", "list")

        assert result.exit_code == 1
        assert "Malformed record in products" in result.output
        assert not isinstance(result.exception, KeyError)


class TestCategoryCommands:
    """Tests for the category command group."""

    def test_add_list_delete(self, invoke, stored):
        invoke("category", "add", "Hardware", "--description", "Tools and parts")
        category_id = stored(Collection.CATEGORIES)[0]["id"]

        listed = invoke("category", "list")
        assert "Tools and parts" in listed.output

        renamed = invoke("category", "update", category_id, "--name", "Tools")
        assert renamed.exit_code == 0
        assert stored(Collection.CATEGORIES)[0]["name"] == "Tools"

        deleted = invoke("category", "delete", category_id)
        assert deleted.exit_code == 0
        assert stored(Collection.CATEGORIES) == []

    def test_delete_unknown_category(self, invoke):
        result = invoke("category", "delete", "missing")

        assert result.exit_code == 1


class TestStockAndSales:
    """Tests for stock intake and sale commands."""

    def test_stock_then_sale(self, invoke, stored, product_id):
        """Test the intake-then-sale scenario end to end."""
        assert invoke("stock", "add", product_id, "10", "4").exit_code == 0
        added = invoke("stock", "add", product_id, "10", "6")
        assert "Average cost:   $5.00" in added.output

        sold = invoke("sale", "record", product_id, "5", "12")

        assert sold.exit_code == 0
        assert "Revenue:        $60.00" in sold.output
        assert "Profit:         $35.00" in sold.output
        assert stored(Collection.PRODUCTS)[0]["stock"] == 15
        assert len(stored(Collection.STOCK_ENTRIES)) == 2
        assert stored(Collection.SALES)[0]["profit"] == 35.0

    def test_stock_for_unknown_product(self, invoke, stored):
        result = invoke("stock", "add", "missing", "5", "1")

        assert result.exit_code == 1
        assert "Product not found" in result.output
        assert stored(Collection.STOCK_ENTRIES) == []

    def test_sale_with_insufficient_stock(self, invoke, stored, product_id):
        result = invoke("sale", "record", product_id, "1", "10")

        assert result.exit_code == 1
        assert "available: 0, requested: 1" in result.output
        assert stored(Collection.SALES) == []

    def test_history_and_sale_list(self, invoke, product_id):
        invoke("stock", "add", product_id, "3", "2")
        invoke("sale", "record", product_id, "1", "5")

        history = invoke("stock", "history")
        sales = invoke("sale", "list", "--recent", "5")

        assert "+3" in history.output
        assert "Widget" in sales.output
        assert "profit $3.00" in sales.output

    def test_empty_listings(self, invoke):
        assert "No stock entries" in invoke("stock", "history").output
        assert "No sales found" in invoke("sale", "list").output
        assert "No products found" in invoke("product", "list").output


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_summary_report(self, invoke, product_id):
        result = invoke("summary")

        assert result.exit_code == 0
        assert "Products: 1" in result.output
        assert "Widget: 0 piece" in result.output

    def test_summary_json(self, invoke, product_id):
        result = invoke("summary", "--json")

        data = json.loads(result.stdout)
        assert data["total_products"] == 1
        assert data["low_stock_products"][0]["id"] == product_id

    def test_summary_json_from_fresh_process(self, tmp_path):
        """Test that stdout of a real process holds only the JSON document."""
        result = subprocess.run(
            [sys.executable, "-m", "stockbook.cli", "--data-dir", str(tmp_path / "data"), "summary", "--json"],
            cwd=tmp_path,
            env={**os.environ, "PYTHONPATH": str(REPO_ROOT)},
            capture_output=True,
            text=True,
            timeout=60
        )

        assert result.returncode == 0, result.stderr
        assert json.loads(result.stdout)["total_products"] == 0
        assert "Inventory loaded" in result.stderr


def test_config_info(runner):
    result = runner.invoke(cli, ["config-info"])

    assert result.exit_code == 0
    assert "Storage:" in result.output
