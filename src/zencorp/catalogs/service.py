from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Iterable, Optional, Sequence

from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Catalog
from .repository import CatalogRepository

logger = logging.getLogger(__name__)

_CATALOG_ADMINS = frozenset({Role.DIRECTOR, Role.MANAGER})


class CatalogService:
    """Department hierarchy: creation and sub-tree lookups."""

    def __init__(self, catalogs: CatalogRepository):
        self._catalogs = catalogs

    def list_catalogs(self) -> Sequence[Catalog]:
        return self._catalogs.list_all()

    def get(self, catalog_id: str) -> Catalog:
        catalog = self._catalogs.get_by_id(catalog_id)
        if not catalog:
            raise NotFoundError("Catalog not found")
        return catalog

    def create_catalog(
        self,
        *,
        current_role: Role,
        name: str,
        positions: Iterable[str] = (),
        parent_id: Optional[str] = None,
    ) -> Catalog:
        if current_role not in _CATALOG_ADMINS:
            raise AuthorizationError("Only directors and managers can create catalogs")

        name = require_non_empty(name, "Catalog name")
        cleaned = tuple(p.strip() for p in positions if p and p.strip())
        parent_id = (parent_id or "").strip() or None
        if parent_id and not self._catalogs.get_by_id(parent_id):
            raise ValidationError("Parent catalog does not exist")

        catalog = Catalog(catalog_id=new_id("cat"), name=name, positions=cleaned, parent_id=parent_id)
        self._catalogs.create(catalog)
        logger.info("Created catalog %s (%s) under %s", catalog.catalog_id, name, parent_id or "root")
        return catalog

    def add_position(self, *, current_role: Role, catalog_id: str, position: str) -> Catalog:
        if current_role not in _CATALOG_ADMINS:
            raise AuthorizationError("Only directors and managers can edit catalogs")

        catalog = self.get(catalog_id)
        position = require_non_empty(position, "Position")
        if position in catalog.positions:
            return catalog

        positions = catalog.positions + (position,)
        if not self._catalogs.update_positions(catalog_id, positions):
            raise ValidationError("Failed to update catalog")
        return Catalog(catalog_id=catalog.catalog_id, name=catalog.name, positions=positions, parent_id=catalog.parent_id)

    def descendant_ids(self, catalog_id: str) -> set[str]:
        """The catalog itself plus every nested sub-catalog."""
        children = self._children_index(self._catalogs.list_all())
        found = {catalog_id}
        queue = deque([catalog_id])
        while queue:
            current = queue.popleft()
            for child in children.get(current, ()):
                if child not in found:
                    found.add(child)
                    queue.append(child)
        return found

    def tree(self) -> list[dict]:
        catalogs = self._catalogs.list_all()
        by_id = {c.catalog_id: c for c in catalogs}
        children = self._children_index(catalogs)

        def node(catalog_id: str, seen: frozenset[str]) -> dict:
            data = by_id[catalog_id].as_dict()
            data["children"] = [
                node(child, seen | {child}) for child in children.get(catalog_id, ()) if child not in seen
            ]
            return data

        # Orphans (parent missing) are shown as roots.
        roots = [c.catalog_id for c in catalogs if not c.parent_id or c.parent_id not in by_id]
        return [node(r, frozenset({r})) for r in roots]

    @staticmethod
    def _children_index(catalogs: Iterable[Catalog]) -> dict[str, list[str]]:
        children: dict[str, list[str]] = defaultdict(list)
        for c in catalogs:
            if c.parent_id:
                children[c.parent_id].append(c.catalog_id)
        return children
