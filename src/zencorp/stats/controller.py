from __future__ import annotations

from flask import Flask

from ..common.web import api_view, ok, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    stats = container.stats_service

    @app.route("/api/stats/summary", methods=["GET"], endpoint="api_stats_summary")
    @api_view
    @roles_required(Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD)
    def api_stats_summary():
        return ok({"summary": stats.dashboard_summary()})

    @app.route("/api/stats/activity", methods=["GET"], endpoint="api_stats_activity")
    @api_view
    @roles_required(Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD)
    def api_stats_activity():
        return ok({"activity": stats.activity_last_7_days()})
