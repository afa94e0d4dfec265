"""Category data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from ..utils.ids import generate_id, utc_now, parse_timestamp


@dataclass(frozen=True)
class Category:
    """A product grouping. Products refer to it by name only."""

    name: str
    description: Optional[str] = None
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            created_at=parse_timestamp(data.get("created_at")) or utc_now()
        )
