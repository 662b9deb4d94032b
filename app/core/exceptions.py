"""
Application exceptions raised by services and mapped to HTTP responses
"""


class AppError(Exception):
    """Base class for expected, user-facing failures."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    """Input violates a business rule (ownership, overlapping periods, dates)."""
    status_code = 400


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404
