# utils/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from configs import db

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Terjadi kesalahan pada server"


class ApiError(Exception):
    status_code = 500
    default_message = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(ApiError):
    status_code = 401
    default_message = "Access token required"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Anda tidak memiliki akses"


class ValidationError(ApiError):
    status_code = 400
    default_message = "Data tidak valid"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Data tidak ditemukan"


class ConflictError(ApiError):
    # status tidak valid / duplikat / masih dipakai
    status_code = 400
    default_message = "Data bentrok dengan data yang ada"


class UnexpectedError(ApiError):
    status_code = 500


def error_response(message: str, status_code: int):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        if e.status_code >= 500:
            db.session.rollback()
            logger.error("API error: %s", e.message)
            return error_response(SERVER_ERROR_MESSAGE, e.status_code)
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        db.session.rollback()
        logger.exception("Unhandled error on request")
        return error_response(SERVER_ERROR_MESSAGE, 500)
