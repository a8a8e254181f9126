from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import auth_required, current_principal
from ..common.http import request_data
from ..common.serializers import check_in_json
from ..container import Container
from ..core.enums import CheckInType, Role
from ..core.exceptions import AuthorizationError, ValidationError

_MESSAGES = {CheckInType.IN: "Checked in successfully", CheckInType.OUT: "Checked out successfully"}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _respond(result):
        body = check_in_json(result)
        body["message"] = _MESSAGES[result.type]
        return jsonify(body)

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @auth_required(container)
    def checkin():
        """Students send `qr_code_data`; admins send `student_number` and `event_id`."""

        principal = current_principal()
        data = request_data()

        if principal.role == Role.ADMIN:
            if "qr_code_data" in data and "student_number" not in data:
                raise AuthorizationError("Student access required")
            return _respond(service.check_in_manual(data.get("student_number", ""), data.get("event_id")))

        if "student_number" in data:
            raise AuthorizationError("Admin access required")
        return _respond(service.check_in_by_qr(principal, data.get("qr_code_data", "")))

    @app.route("/api/attendance/checkin/image", methods=["POST"], endpoint="attendance_checkin_image")
    @auth_required(container, Role.STUDENT)
    def checkin_image():
        upload = request.files.get("image")
        if not upload or not upload.filename:
            raise ValidationError("image is required", field="image")
        return _respond(service.check_in_by_qr_image(current_principal(), upload.stream))
