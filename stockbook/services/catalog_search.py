"""Search, filter and listing helpers used by the front ends."""

from typing import Dict, List, Sequence

from ..models.category import Category
from ..models.product import Product
from ..models.sale import Sale


def _matches(term: str, *values) -> bool:
    if not term:
        return True
    needle = term.lower()
    return any(needle in value.lower() for value in values if value)


def search_products(products: Sequence[Product], term: str = "", category: str = "") -> List[Product]:
    """Products whose name or category contains ``term``, optionally in one category."""
    return [
        p for p in products
        if _matches(term, p.name, p.category) and (not category or p.category == category)
    ]


def search_categories(categories: Sequence[Category], term: str = "") -> List[Category]:
    return [c for c in categories if _matches(term, c.name, c.description)]


def search_sales(
    sales: Sequence[Sale],
    products: Sequence[Product],
    term: str = "",
    category: str = ""
) -> List[Sale]:
    """
    Sales matching ``term`` on the recorded product name or the product's category.

    Category is looked up on the current product, so sales of a deleted
    product never match a category filter.
    """
    by_id: Dict[str, Product] = {p.id: p for p in products}
    results = []
    for sale in sales:
        product = by_id.get(sale.product_id)
        product_category = product.category if product else None
        if not _matches(term, sale.product_name, product_category):
            continue
        if category and product_category != category:
            continue
        results.append(sale)
    return results


def recent_sales(sales: Sequence[Sale], limit: int = 5) -> List[Sale]:
    """Newest sales first."""
    return sorted(sales, key=lambda s: s.created_at, reverse=True)[:limit]


def available_products(products: Sequence[Product]) -> List[Product]:
    """Products that can currently be sold."""
    return [p for p in products if p.stock > 0]


def stock_value(product: Product) -> float:
    """Stock on hand valued at average cost."""
    return product.stock * (product.purchase_price or 0.0)
