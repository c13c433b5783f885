"""
Service-level exceptions. Routers never build error responses themselves;
the handlers in exceptions.py translate these into HTTP responses.
"""
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError


class ServiceError(Exception):
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ServiceError):
    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class ConflictError(ServiceError):
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class StorageUnavailable(ServiceError):
    """Deadline exceeded or connection lost. Safe for the caller to retry."""
    status_code = 503
    retryable = True


def validation_messages(errors: List[dict]) -> List[str]:
    """Flatten pydantic error dicts into ``field: message`` strings."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


def validate(model_cls, data):
    """Build ``model_cls`` from ``data``, reporting failures as ValidationFailed."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationFailed(errors=validation_messages(exc.errors())) from exc
