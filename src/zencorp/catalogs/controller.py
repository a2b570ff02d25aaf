from __future__ import annotations

from flask import Flask

from ..common.web import api_view, current_role, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    catalogs = container.catalog_service

    @app.route("/api/catalogs", methods=["GET"], endpoint="api_catalogs")
    @api_view
    def api_catalogs():
        return ok({"catalogs": [c.as_dict() for c in catalogs.list_catalogs()], "tree": catalogs.tree()})

    @app.route("/api/catalogs", methods=["POST"], endpoint="api_create_catalog")
    @api_view
    def api_create_catalog():
        data = json_body()
        catalog = catalogs.create_catalog(
            current_role=current_role(),
            name=data.get("name", ""),
            positions=data.get("positions") or [],
            parent_id=data.get("parentId"),
        )
        return ok({"catalog": catalog.as_dict()}, 201)

    @app.route("/api/catalogs/<catalog_id>/positions", methods=["POST"], endpoint="api_add_position")
    @api_view
    def api_add_position(catalog_id: str):
        data = json_body()
        catalog = catalogs.add_position(current_role=current_role(), catalog_id=catalog_id, position=data.get("position", ""))
        return ok({"catalog": catalog.as_dict()})
