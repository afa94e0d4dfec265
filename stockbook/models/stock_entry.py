"""Stock intake ledger entry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from ..utils.ids import generate_id, utc_now, parse_timestamp


@dataclass(frozen=True)
class StockEntry:
    """
    One receipt of goods for a product.

    Entries are append-only; ``total_cost`` is fixed when the entry is
    created and is never recomputed.
    """

    product_id: str
    quantity: int
    purchase_price: float  # per unit, at time of receipt
    total_cost: float
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, product_id: str, quantity: int, purchase_price: float) -> "StockEntry":
        """Build a new entry, computing its total cost."""
        return cls(
            product_id=product_id,
            quantity=quantity,
            purchase_price=purchase_price,
            total_cost=quantity * purchase_price
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "purchase_price": self.purchase_price,
            "total_cost": self.total_cost,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StockEntry":
        """Create instance from dictionary."""
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            quantity=data["quantity"],
            purchase_price=data["purchase_price"],
            total_cost=data["total_cost"],
            created_at=parse_timestamp(data.get("created_at")) or utc_now()
        )
