from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Catalog:
    """A department/organizational unit, optionally nested under a parent."""

    catalog_id: str
    name: str
    positions: tuple[str, ...] = field(default_factory=tuple)
    parent_id: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.catalog_id,
            "name": self.name,
            "positions": list(self.positions),
            "parentId": self.parent_id,
        }
