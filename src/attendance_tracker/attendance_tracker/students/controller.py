from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import auth_required, current_principal
from ..common.http import request_data, uploaded_file
from ..common.serializers import (
    attendance_with_event_json,
    enrollment_json,
    import_summary_json,
    student_event_json,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    # ----- admin roster -----

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @auth_required(container, Role.ADMIN)
    def list_students():
        return jsonify([enrollment_json(s) for s in service.list_students()])

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @auth_required(container, Role.ADMIN)
    def get_student(student_id: int):
        return jsonify(enrollment_json(service.get_student(student_id)))

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @auth_required(container, Role.ADMIN)
    def create_student():
        return jsonify(enrollment_json(service.create_student(request_data()))), 201

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @auth_required(container, Role.ADMIN)
    def update_student(student_id: int):
        return jsonify(enrollment_json(service.update_student(student_id, request_data())))

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @auth_required(container, Role.ADMIN)
    def delete_student(student_id: int):
        service.delete_student(student_id)
        return jsonify({"message": "Student deleted"})

    @app.route("/api/students/import", methods=["POST"], endpoint="students_import")
    @auth_required(container, Role.ADMIN)
    def import_students():
        upload = request.files.get("file")
        if upload and upload.filename:
            summary = service.import_file(filename=upload.filename, stream=upload.stream)
        else:
            body = request.get_json(silent=True)
            rows = body.get("students") if isinstance(body, dict) else body
            if not isinstance(rows, list):
                raise ValidationError("Provide a file or a list of students", field="students")
            summary = service.import_rows(rows)
        return jsonify(import_summary_json(summary))

    @app.route("/api/students/export.csv", methods=["GET"], endpoint="students_export")
    @auth_required(container, Role.ADMIN)
    def export_students():
        return app.response_class(
            service.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=students.csv"},
        )

    # ----- student self-service -----

    def _me():
        return service.get_profile(current_principal().student_number)

    @app.route("/api/student/profile", methods=["GET"], endpoint="student_profile")
    @auth_required(container, Role.STUDENT)
    def profile():
        return jsonify(enrollment_json(_me()))

    @app.route("/api/student/profile", methods=["PUT"], endpoint="student_profile_update")
    @auth_required(container, Role.STUDENT)
    def update_profile():
        data = request_data()
        updated = service.update_profile(
            current_principal().student_number,
            age=data.get("age"),
            email=data.get("email"),
            birthday=data.get("birthday"),
            picture=uploaded_file("profile_picture"),
        )
        return jsonify(enrollment_json(updated))

    @app.route("/api/student/stats", methods=["GET"], endpoint="student_stats")
    @auth_required(container, Role.STUDENT)
    def stats():
        s = container.report_service.student_stats(_me().student)
        return jsonify(
            {"total_checkins": s.total_checkins, "this_month": s.this_month, "attendance_rate": s.attendance_rate}
        )

    @app.route("/api/student/events", methods=["GET"], endpoint="student_events")
    @auth_required(container, Role.STUDENT)
    def events():
        views = container.scope_resolver.events_visible_to(_me().student)
        return jsonify([student_event_json(v) for v in views])

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @auth_required(container, Role.STUDENT)
    def attendance():
        rows = container.attendance_service.history_for_student(_me().student.student_id)
        return jsonify([attendance_with_event_json(r) for r in rows])
