"""Inventory service: the authoritative in-memory state and its mutations."""

import functools
import math
import threading
from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence

from ..models.category import Category
from ..models.product import Product
from ..models.sale import Sale
from ..models.stock_entry import StockEntry
from ..models.summary import Summary
from ..storage.base_store import BaseStore, Collection
from ..storage.factory import create_store
from ..utils.config import get_config
from ..utils.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    ProductNotFoundError,
    StorageError,
)
from ..utils.logger import get_inventory_logger, get_error_logger

UPDATABLE_PRODUCT_FIELDS = frozenset({"name", "category", "unit", "price"})
UPDATABLE_CATEGORY_FIELDS = frozenset({"name", "description"})


def serialized(method):
    """Run a mutation under the service lock, from lookup to commit."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def weighted_average_cost(
    current_stock: int,
    current_cost: Optional[float],
    quantity: int,
    purchase_price: float
) -> float:
    """
    Average unit cost after receiving ``quantity`` units at ``purchase_price``.

    A product without a recorded cost counts as cost 0. Falls back to the
    incoming price when the resulting stock is zero.
    """
    new_stock = current_stock + quantity
    if new_stock <= 0:
        return purchase_price
    current_value = current_stock * (current_cost or 0.0)
    return (current_value + quantity * purchase_price) / new_stock


class InventoryService:
    """
    Owns the products, categories, stock entries and sales collections.

    Every mutation builds the new collection, saves it to the store and only
    then swaps it into memory. A failed save raises ``StorageError`` and
    leaves the in-memory state as it was.
    """

    def __init__(self, store: Optional[BaseStore] = None):
        self.config = get_config()
        self.logger = get_inventory_logger()
        self.error_logger = get_error_logger()
        self.store = store if store is not None else create_store(self.config)
        self._lock = threading.RLock()

        self._products: List[Product] = self._load(Collection.PRODUCTS, Product.from_dict)
        self._categories: List[Category] = self._load(Collection.CATEGORIES, Category.from_dict)
        self._stock_entries: List[StockEntry] = self._load(Collection.STOCK_ENTRIES, StockEntry.from_dict)
        self._sales: List[Sale] = self._load(Collection.SALES, Sale.from_dict)

        self.logger.info(
            f"Inventory loaded: {len(self._products)} products, "
            f"{len(self._categories)} categories, "
            f"{len(self._stock_entries)} stock entries, {len(self._sales)} sales"
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    @property
    def stock_entries(self) -> List[StockEntry]:
        return list(self._stock_entries)

    @property
    def sales(self) -> List[Sale]:
        return list(self._sales)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def get_summary(self) -> Summary:
        """Recompute dashboard figures from the current collections."""
        return Summary.from_collections(self._products, self._categories, self._sales)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    @serialized
    def create_product(self, name: str, category: str, unit: str, price: float) -> Product:
        """Add a product with zero stock. Duplicate names are allowed."""
        _require_name(name, "Product name")
        _require_price(price, "price")

        product = Product(name=name, category=category, unit=unit, price=price)
        products = self._products + [product]
        self._persist(Collection.PRODUCTS, products)
        self._products = products

        self.logger.info(f"Created product {product.id} ({name})")
        return product

    @serialized
    def update_product(self, product_id: str, **updates: Any) -> Optional[Product]:
        """
        Merge ``updates`` into a product.

        Only name, category, unit and price can be changed here; stock and
        cost move through ``add_stock`` and ``record_sale``.

        Returns:
            The updated product, or None if no product has that id

        Raises:
            InvalidInputError: If a field is not updatable or a value is invalid
        """
        _check_fields(updates, UPDATABLE_PRODUCT_FIELDS, "product")
        if "name" in updates:
            _require_name(updates["name"], "Product name")
        if "price" in updates:
            _require_price(updates["price"], "price")

        current = self.get_product(product_id)
        if current is None:
            self.logger.warning(f"Update skipped, unknown product {product_id}")
            return None

        updated = replace(current, **updates)
        products = [updated if p.id == product_id else p for p in self._products]
        self._persist(Collection.PRODUCTS, products)
        self._products = products

        self.logger.info(f"Updated product {product_id}: {sorted(updates)}")
        return updated

    @serialized
    def delete_product(self, product_id: str) -> bool:
        """
        Remove a product. Its stock entries and sales stay in place.

        Returns:
            True if a product was removed
        """
        if self.get_product(product_id) is None:
            self.logger.warning(f"Delete skipped, unknown product {product_id}")
            return False

        products = [p for p in self._products if p.id != product_id]
        self._persist(Collection.PRODUCTS, products)
        self._products = products

        self.logger.info(f"Deleted product {product_id}")
        return True

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @serialized
    def create_category(self, name: str, description: Optional[str] = None) -> Category:
        _require_name(name, "Category name")

        category = Category(name=name, description=description)
        categories = self._categories + [category]
        self._persist(Collection.CATEGORIES, categories)
        self._categories = categories

        self.logger.info(f"Created category {category.id} ({name})")
        return category

    @serialized
    def update_category(self, category_id: str, **updates: Any) -> Optional[Category]:
        """Merge name and/or description into a category. None if unknown."""
        _check_fields(updates, UPDATABLE_CATEGORY_FIELDS, "category")
        if "name" in updates:
            _require_name(updates["name"], "Category name")

        current = self.get_category(category_id)
        if current is None:
            self.logger.warning(f"Update skipped, unknown category {category_id}")
            return None

        updated = replace(current, **updates)
        categories = [updated if c.id == category_id else c for c in self._categories]
        self._persist(Collection.CATEGORIES, categories)
        self._categories = categories

        self.logger.info(f"Updated category {category_id}: {sorted(updates)}")
        return updated

    @serialized
    def delete_category(self, category_id: str) -> bool:
        """Remove a category. Products keep the category name they carry."""
        if self.get_category(category_id) is None:
            self.logger.warning(f"Delete skipped, unknown category {category_id}")
            return False

        categories = [c for c in self._categories if c.id != category_id]
        self._persist(Collection.CATEGORIES, categories)
        self._categories = categories

        self.logger.info(f"Deleted category {category_id}")
        return True

    # ------------------------------------------------------------------
    # Stock intake and sales
    # ------------------------------------------------------------------

    @serialized
    def add_stock(self, product_id: str, quantity: int, purchase_price: float) -> StockEntry:
        """
        Receive ``quantity`` units of a product at ``purchase_price`` each.

        Appends a stock entry, raises the product's stock and recomputes its
        weighted-average cost.

        Raises:
            ProductNotFoundError: If the product does not exist
            InvalidInputError: If quantity or price is invalid
        """
        _require_quantity(quantity)
        _require_price(purchase_price, "purchase_price")

        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"Stock intake rejected, unknown product {product_id}")
            raise ProductNotFoundError(
                f"Product not found: {product_id}",
                details={"product_id": product_id}
            )

        entry = StockEntry.create(product_id, quantity, purchase_price)
        updated = replace(
            product,
            stock=product.stock + quantity,
            purchase_price=weighted_average_cost(
                product.stock, product.purchase_price, quantity, purchase_price
            )
        )

        products = [updated if p.id == product_id else p for p in self._products]
        entries = self._stock_entries + [entry]
        self._persist(Collection.PRODUCTS, products)
        self._persist(Collection.STOCK_ENTRIES, entries)
        self._products = products
        self._stock_entries = entries

        self.logger.info(
            f"Stock in {product_id}: +{quantity} @ {purchase_price:.2f} "
            f"-> stock {updated.stock}, avg cost {updated.purchase_price:.4f}"
        )
        return entry

    @serialized
    def record_sale(self, product_id: str, quantity: int, selling_price: float) -> Sale:
        """
        Sell ``quantity`` units of a product at ``selling_price`` each.

        The product's current average cost is the cost basis for profit.

        Raises:
            ProductNotFoundError: If the product does not exist
            InsufficientStockError: If stock is lower than quantity
            InvalidInputError: If quantity or price is invalid
        """
        _require_quantity(quantity)
        _require_price(selling_price, "selling_price")

        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"Sale rejected, unknown product {product_id}")
            raise ProductNotFoundError(
                f"Product not found: {product_id}",
                details={"product_id": product_id}
            )

        if product.stock < quantity:
            self.logger.warning(
                f"Sale rejected for {product_id}: requested {quantity}, in stock {product.stock}"
            )
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}",
                details={
                    "product_id": product_id,
                    "available": product.stock,
                    "requested": quantity
                }
            )

        sale = Sale.create(
            product_id=product_id,
            product_name=product.name,
            quantity=quantity,
            selling_price=selling_price,
            purchase_price=product.purchase_price or 0.0
        )
        updated = replace(product, stock=product.stock - quantity)

        products = [updated if p.id == product_id else p for p in self._products]
        sales = self._sales + [sale]
        self._persist(Collection.PRODUCTS, products)
        self._persist(Collection.SALES, sales)
        self._products = products
        self._sales = sales

        self.logger.info(
            f"Sale {sale.id}: {quantity} x {product.name} @ {selling_price:.2f} "
            f"(revenue {sale.total_revenue:.2f}, profit {sale.profit:.2f})"
        )
        return sale

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self, collection: Collection, factory: Callable[[dict], Any]) -> list:
        records = []
        for index, record in enumerate(self.store.load(collection)):
            try:
                records.append(factory(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                self.error_logger.error(f"Malformed record {index} in {collection.value}: {e!r}")
                raise StorageError(
                    f"Malformed record in {collection.value}",
                    details={"collection": collection.value, "index": index}
                ) from e
        return records

    def _persist(self, collection: Collection, records: Sequence[Any]) -> None:
        try:
            self.store.save(collection, [record.to_dict() for record in records])
        except StorageError as e:
            self.error_logger.error(
                f"Failed to persist {collection.value}: {e.message}",
                extra={"details": e.details}
            )
            raise


def _require_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInputError(
            "Quantity must be a positive integer",
            details={"quantity": quantity}
        )


def _require_price(price: Any, label: str) -> None:
    if (
        isinstance(price, bool)
        or not isinstance(price, (int, float))
        or not math.isfinite(price)
        or price < 0
    ):
        raise InvalidInputError(
            f"{label} must be a non-negative number",
            details={label: price}
        )


def _require_name(name: Any, label: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError(f"{label} cannot be empty")


def _check_fields(updates: dict, allowed: frozenset, entity: str) -> None:
    rejected = sorted(set(updates) - allowed)
    if rejected:
        raise InvalidInputError(
            f"Cannot update {entity} field(s): {', '.join(rejected)}",
            details={"allowed": sorted(allowed)}
        )
