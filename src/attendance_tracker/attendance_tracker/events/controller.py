from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..common.auth import auth_required
from ..common.http import request_data
from ..common.serializers import attendance_with_student_json, event_json, event_with_associations_json
from ..container import Container
from ..core.enums import Role

_XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    service = container.event_service

    @app.route("/api/events", methods=["GET"], endpoint="events_list")
    @auth_required(container, Role.ADMIN)
    def list_events():
        return jsonify([event_with_associations_json(e) for e in service.list_events()])

    @app.route("/api/events/<int:event_id>", methods=["GET"], endpoint="events_get")
    @auth_required(container, Role.ADMIN)
    def get_event(event_id: int):
        return jsonify(event_with_associations_json(service.get_event(event_id)))

    @app.route("/api/events", methods=["POST"], endpoint="events_create")
    @auth_required(container, Role.ADMIN)
    def create_event():
        return jsonify(event_with_associations_json(service.create_event(request_data()))), 201

    @app.route("/api/events/<int:event_id>", methods=["PUT"], endpoint="events_update")
    @auth_required(container, Role.ADMIN)
    def update_event(event_id: int):
        return jsonify(event_with_associations_json(service.update_event(event_id, request_data())))

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="events_delete")
    @auth_required(container, Role.ADMIN)
    def delete_event(event_id: int):
        service.delete_event(event_id)
        return jsonify({"message": "Event deleted"})

    @app.route("/api/events/<int:event_id>/regenerate-qr", methods=["POST"], endpoint="events_regenerate_qr")
    @auth_required(container, Role.ADMIN)
    def regenerate_qr(event_id: int):
        return jsonify(event_with_associations_json(service.regenerate_qr(event_id)))

    @app.route("/api/events/<int:event_id>/qr.png", methods=["GET"], endpoint="events_qr_png")
    @auth_required(container, Role.ADMIN)
    def qr_png(event_id: int):
        return send_file(io.BytesIO(service.qr_png(event_id)), mimetype="image/png")

    @app.route("/api/events/<int:event_id>/attendance", methods=["GET"], endpoint="events_attendance")
    @auth_required(container, Role.ADMIN)
    def event_attendance(event_id: int):
        rows = container.attendance_service.event_attendance(event_id)
        event = service.get_event(event_id).event
        return jsonify({"event": event_json(event), "attendance": [attendance_with_student_json(r) for r in rows]})

    @app.route("/api/events/<int:event_id>/attendance.xlsx", methods=["GET"], endpoint="events_attendance_xlsx")
    @auth_required(container, Role.ADMIN)
    def event_attendance_xlsx(event_id: int):
        data = container.report_service.event_sheet_xlsx(event_id)
        return send_file(
            io.BytesIO(data),
            mimetype=_XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"event_{event_id}_attendance.xlsx",
        )
