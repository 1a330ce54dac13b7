from typing import List, Optional


class AppError(Exception):
    """Erro base com o status HTTP que o handler deve responder."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400

    def __init__(self, errors: List[str], message: str = "Validation errors"):
        super().__init__(message)
        self.errors = errors


class ConflictError(AppError):
    status_code = 409


class AuthError(AppError):
    status_code = 401


class InvalidTokenError(AuthError):
    pass


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404
