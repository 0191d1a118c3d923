# backend_api/errors.py
from typing import Dict, Optional


class ApiError(Exception):
    """
    Error base de la API.
    Cada subclase fija el código HTTP y la etiqueta estable `error`
    que se devuelve al cliente.
    """

    status_code = 400
    error = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class NotFound(ApiError):
    status_code = 404
    error = "NOT_FOUND"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found with id: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class Conflict(ApiError):
    status_code = 409
    error = "CONFLICT"


class InvalidInput(ApiError):
    status_code = 400
    error = "INVALID_INPUT"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.fields:
            body["fields"] = self.fields
        return body


class Unauthorized(ApiError):
    status_code = 401
    error = "UNAUTHORIZED"


class Forbidden(ApiError):
    status_code = 403
    error = "FORBIDDEN"


class InvalidCredentials(ApiError):
    status_code = 401
    error = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)
