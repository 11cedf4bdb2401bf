from __future__ import annotations

from typing import Any


class APIError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(400, "validation_error", message, details)


class BadRequestError(APIError):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(400, "bad_request", message, details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Invalid API key"):
        super().__init__(401, "unauthorized", message)


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(404, "not_found", message, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(409, "conflict", message, details)


class InternalError(APIError):
    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(500, "internal_error", message, details)
