"""Dashboard summary data model."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Sequence

from .category import Category
from .product import Product
from .sale import Sale

LOW_STOCK_THRESHOLD = 5


@dataclass
class Summary:
    """Aggregate figures derived from the current inventory collections."""

    total_products: int = 0
    total_categories: int = 0
    total_stock: int = 0
    total_sales: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0
    low_stock_products: List[Product] = field(default_factory=list)

    @classmethod
    def from_collections(
        cls,
        products: Sequence[Product],
        categories: Sequence[Category],
        sales: Sequence[Sale]
    ) -> "Summary":
        """Recompute every figure from the given collections."""
        return cls(
            total_products=len(products),
            total_categories=len(categories),
            total_stock=sum(p.stock for p in products),
            total_sales=len(sales),
            total_revenue=sum(s.total_revenue for s in sales),
            total_profit=sum(s.profit for s in sales),
            low_stock_products=[p for p in products if p.stock <= LOW_STOCK_THRESHOLD]
        )

    @property
    def out_of_stock_count(self) -> int:
        return sum(1 for p in self.low_stock_products if p.stock == 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_products": self.total_products,
            "total_categories": self.total_categories,
            "total_stock": self.total_stock,
            "total_sales": self.total_sales,
            "total_revenue": round(self.total_revenue, 2),
            "total_profit": round(self.total_profit, 2),
            "low_stock_products": [p.to_dict() for p in self.low_stock_products]
        }

    def get_report(self) -> str:
        """Get a human-readable summary."""
        report_lines = [
            f"Products: {self.total_products}",
            f"Categories: {self.total_categories}",
            f"Total stock: {self.total_stock}",
            f"Sales: {self.total_sales}",
            f"Revenue: ${self.total_revenue:.2f}",
            f"Profit: ${self.total_profit:.2f}"
        ]

        if self.low_stock_products:
            report_lines.append(f"\nLow stock ({len(self.low_stock_products)}):")
            for product in self.low_stock_products:
                report_lines.append(f"  - {product.name}: {product.stock} {product.unit}")
        else:
            report_lines.append("\nAll products are well stocked")

        return "\n".join(report_lines)
