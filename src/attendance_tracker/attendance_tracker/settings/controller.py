from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import auth_required
from ..common.http import request_data
from ..common.serializers import settings_json
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @auth_required(container)
    def get_settings():
        return jsonify(settings_json(container.settings_service.get_settings()))

    @app.route("/api/settings", methods=["PUT"], endpoint="settings_update")
    @auth_required(container, Role.ADMIN)
    def update_settings():
        return jsonify(settings_json(container.settings_service.update_settings(request_data())))

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @auth_required(container, Role.ADMIN)
    def admin_stats():
        s = container.report_service.admin_stats()
        return jsonify(
            {
                "total_students": s.total_students,
                "active_events": s.active_events,
                "total_attendance": s.total_attendance,
                "total_courses": s.total_courses,
            }
        )
