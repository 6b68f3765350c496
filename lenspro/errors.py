from flask import jsonify, render_template, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from lenspro.extensions import db


class AppError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


HTTP_ERROR_MESSAGES = {
    400: "Bad request",
    401: "Please sign in to continue.",
    403: "You do not have access to this page.",
    404: "Page not found",
    405: "Method not allowed",
    413: "Uploaded file is too large.",
    429: "Too many requests. Please slow down.",
}


def error_response(message, status_code):
    """JSON under ``/api/``, the error page everywhere else."""
    if request.path.startswith("/api/"):
        return jsonify({"error": message}), status_code
    return render_template("error.html", message=message, status_code=status_code), status_code


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        if err.status_code >= 500:
            app.logger.warning("Request to %s failed: %s", request.path, err.message)
        return error_response(err.message, err.status_code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err):
        db.session.rollback()
        app.logger.warning("Database integrity error: %s", getattr(err, "orig", err))
        return error_response("Conflict. Resource already exists.", 409)

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        if err.code is None or err.code >= 500:
            return err
        return error_response(HTTP_ERROR_MESSAGES.get(err.code, err.name), err.code)

    @app.errorhandler(500)
    def server_error(_err):
        app.logger.exception("Internal server error")
        return error_response("Something went wrong.", 500)
