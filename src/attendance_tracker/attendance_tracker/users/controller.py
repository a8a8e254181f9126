from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import auth_required, current_principal
from ..common.http import request_data, uploaded_file
from ..common.serializers import enrollment_json, user_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = request_data()
        result = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        return jsonify({"token": result.token, "user": user_json(result.user)})

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_account():
        data = request_data()
        user = container.auth_service.register(
            student_number=data.get("student_number", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            age=data.get("age"),
            birthday=data.get("birthday", ""),
            picture=uploaded_file("profile_picture"),
        )
        return jsonify({"message": "Registration successful", "user": user_json(user)}), 201

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required(container)
    def me():
        return jsonify({"user": user_json(current_principal())})

    @app.route("/api/students/verify", methods=["POST"], endpoint="students_verify")
    def verify_student_number():
        enrollment = container.auth_service.verify_student_number(request_data().get("student_number", ""))
        return jsonify({"exists": True, "student": enrollment_json(enrollment)})
