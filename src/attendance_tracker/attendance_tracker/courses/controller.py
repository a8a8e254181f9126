from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import auth_required
from ..common.http import request_data
from ..common.serializers import course_json, section_with_course_json
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.course_service

    @app.route("/api/courses", methods=["GET"], endpoint="courses_list")
    @auth_required(container)
    def list_courses():
        return jsonify([course_json(c) for c in service.list_courses()])

    @app.route("/api/courses", methods=["POST"], endpoint="courses_create")
    @auth_required(container, Role.ADMIN)
    def create_course():
        data = request_data()
        course = service.create_course(name=data.get("name", ""), description=data.get("description"))
        return jsonify(course_json(course)), 201

    @app.route("/api/courses/<int:course_id>", methods=["PUT"], endpoint="courses_update")
    @auth_required(container, Role.ADMIN)
    def update_course(course_id: int):
        return jsonify(course_json(service.update_course(course_id, request_data())))

    @app.route("/api/courses/<int:course_id>", methods=["DELETE"], endpoint="courses_delete")
    @auth_required(container, Role.ADMIN)
    def delete_course(course_id: int):
        service.delete_course(course_id)
        return jsonify({"message": "Course deleted"})

    @app.route("/api/sections", methods=["GET"], endpoint="sections_list")
    @auth_required(container)
    def list_sections():
        return jsonify([section_with_course_json(s) for s in service.list_sections()])

    @app.route("/api/sections", methods=["POST"], endpoint="sections_create")
    @auth_required(container, Role.ADMIN)
    def create_section():
        data = request_data()
        section = service.create_section(course_id=data.get("course_id"), name=data.get("name", ""))
        return jsonify(section_with_course_json(section)), 201

    @app.route("/api/sections/<int:section_id>", methods=["PUT"], endpoint="sections_update")
    @auth_required(container, Role.ADMIN)
    def update_section(section_id: int):
        return jsonify(section_with_course_json(service.update_section(section_id, request_data())))

    @app.route("/api/sections/<int:section_id>", methods=["DELETE"], endpoint="sections_delete")
    @auth_required(container, Role.ADMIN)
    def delete_section(section_id: int):
        service.delete_section(section_id)
        return jsonify({"message": "Section deleted"})
