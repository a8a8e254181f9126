from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..students.model import UploadedPicture

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 500


def error_response(message: str, status: int, *, field: Optional[str] = None):
    errors = [{"field": field, "message": message}] if field else []
    return jsonify({"message": message, "errors": errors}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status == 500:
            logger.exception("Unhandled domain error")
            return error_response("Internal server error", 500)
        return error_response(str(e), status, field=getattr(e, "field", None))

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e: RequestEntityTooLarge):
        return error_response("Uploaded file is too large", 413)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)


def request_data() -> dict[str, Any]:
    """JSON body, or form fields for multipart requests."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def uploaded_file(field_name: str) -> Optional[UploadedPicture]:
    f = request.files.get(field_name)
    if not f or not f.filename:
        return None
    return UploadedPicture(data=f.read(), mimetype=f.mimetype or "")
