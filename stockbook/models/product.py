"""Product data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from ..utils.ids import generate_id, utc_now, parse_timestamp


@dataclass(frozen=True)
class Product:
    """A sellable item with its current stock level and average cost."""

    name: str
    category: str  # category name, stored by value
    unit: str
    price: float  # selling price per unit
    stock: int = 0
    purchase_price: Optional[float] = None  # weighted-average cost
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Validate and normalize data."""
        if not self.id:
            raise ValueError("Product id cannot be empty")

        if self.stock < 0:
            raise ValueError("Stock cannot be negative")

    @property
    def is_in_stock(self) -> bool:
        return self.stock > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "price": self.price,
            "stock": self.stock,
            "purchase_price": self.purchase_price,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Create instance from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", ""),
            unit=data.get("unit", ""),
            price=data.get("price", 0.0),
            stock=data.get("stock", 0),
            purchase_price=data.get("purchase_price"),
            created_at=parse_timestamp(data.get("created_at")) or utc_now()
        )
