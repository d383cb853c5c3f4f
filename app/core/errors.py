"""Application errors.

Every error carries a machine-readable ``code`` and the HTTP status it maps to.
The handlers in ``app.main`` render them as ``{"success": false, "message", "code"}``.
"""


class AppError(Exception):
    status_code = 500
    default_code = "SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(AppError):
    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 400
    default_code = "CONFLICT"


class AuthError(AppError):
    status_code = 401
    default_code = "UNAUTHORIZED"


class ServerError(AppError):
    status_code = 500
    default_code = "SERVER_ERROR"


# AuthError codes
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
REFRESH_TOKEN_MISSING = "REFRESH_TOKEN_MISSING"
INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
REFRESH_TOKEN_EXPIRED = "REFRESH_TOKEN_EXPIRED"
USER_NOT_FOUND = "USER_NOT_FOUND"
