"""Sale record data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from ..utils.ids import generate_id, utc_now, parse_timestamp


@dataclass(frozen=True)
class Sale:
    """
    A completed sale of one product.

    ``product_name`` and ``purchase_price`` are snapshots taken at the time
    of sale; later edits to the product do not change them.
    """

    product_id: str
    product_name: str
    quantity: int
    selling_price: float
    purchase_price: float
    total_revenue: float
    profit: float
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        product_id: str,
        product_name: str,
        quantity: int,
        selling_price: float,
        purchase_price: float
    ) -> "Sale":
        """Build a new sale, computing revenue and profit."""
        return cls(
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            selling_price=selling_price,
            purchase_price=purchase_price,
            total_revenue=quantity * selling_price,
            profit=quantity * (selling_price - purchase_price)
        )

    @property
    def margin(self) -> float:
        """Profit as a percentage of revenue."""
        if self.total_revenue == 0:
            return 0.0
        return (self.profit / self.total_revenue) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "selling_price": self.selling_price,
            "purchase_price": self.purchase_price,
            "total_revenue": self.total_revenue,
            "profit": self.profit,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sale":
        """Create instance from dictionary."""
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            product_name=data.get("product_name", ""),
            quantity=data["quantity"],
            selling_price=data["selling_price"],
            purchase_price=data.get("purchase_price", 0.0),
            total_revenue=data["total_revenue"],
            profit=data["profit"],
            created_at=parse_timestamp(data.get("created_at")) or utc_now()
        )
