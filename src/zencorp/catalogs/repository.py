from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Catalog


class CatalogRepository(Protocol):
    def list_all(self) -> Sequence[Catalog]:
        raise NotImplementedError

    def get_by_id(self, catalog_id: str) -> Optional[Catalog]:
        raise NotImplementedError

    def create(self, catalog: Catalog) -> None:
        raise NotImplementedError

    def update_positions(self, catalog_id: str, positions: Sequence[str]) -> bool:
        raise NotImplementedError
