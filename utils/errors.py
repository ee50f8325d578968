from enum import Enum

from flask import jsonify


class ErrorType(Enum):
    """Error kinds surfaced to API clients as (http status, wire code)."""

    VALIDATION = (400, "VALIDATION_ERROR")
    UNAUTHORIZED = (401, "UNAUTHORIZED_ERROR")
    LOCKED_OUT = (403, "LOCKED_OUT_ERROR")
    INVALID_CREDENTIALS = (403, "INVALID_CREDENTIALS_ERROR")
    INVALID_PASSWORD = (403, "INVALID_PASSWORD_ERROR")
    NOT_FOUND = (404, "NOT_FOUND_ERROR")
    EMAIL_ALREADY_TAKEN = (409, "EMAIL_ALREADY_TAKEN_ERROR")
    UNPROCESSABLE_ENTITY = (422, "UNPROCESSABLE_ENTITY_ERROR")

    @property
    def status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]


class ApiError(Exception):
    def __init__(self, error_type: ErrorType, message: str, **details):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details

    def to_response(self):
        return jsonify(error=self.error_type.code, message=self.message, **self.details), self.error_type.status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def _handle_api_error(err: ApiError):
        return err.to_response()
