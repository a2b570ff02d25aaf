from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Catalog
from .repository import CatalogRepository


def _to_catalog(r: dict) -> Catalog:
    return Catalog(
        catalog_id=r["id"],
        name=r["name"],
        positions=tuple(load_json(r.get("positions"), [])),
        parent_id=r.get("parent_id"),
    )


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Catalog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, positions, parent_id FROM catalogs ORDER BY name")
            return [_to_catalog(r) for r in fetchall(cur)]

    def get_by_id(self, catalog_id: str) -> Optional[Catalog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, positions, parent_id FROM catalogs WHERE id=%s", (catalog_id,))
            r = fetchone(cur)
            return _to_catalog(r) if r else None

    def create(self, catalog: Catalog) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO catalogs(id, name, positions, parent_id) VALUES(%s,%s,%s,%s)",
                (catalog.catalog_id, catalog.name, dump_json(list(catalog.positions)), catalog.parent_id),
            )

    def update_positions(self, catalog_id: str, positions: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE catalogs SET positions=%s WHERE id=%s",
                (dump_json(list(positions)), catalog_id),
            )
            return cur.rowcount > 0
