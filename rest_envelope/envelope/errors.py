from __future__ import annotations

import re
import traceback
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rest_envelope.schemas.common import ErrorPayload, FieldErrorOut


GENERIC_ERROR_CODE = "error"
HTTP_ERROR_CODE_PREFIX = "error.http."
VALIDATION_ERROR_CODE = "error.form.validation"
VALIDATION_ERROR_MESSAGE = "Not all fields are filled in correctly."


def http_error_code(status_code: int) -> str:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return f"{HTTP_ERROR_CODE_PREFIX}{status_code}"
    slug = re.sub(r"[^a-z0-9_]", "", phrase.lower().replace("-", " ").replace(" ", "_"))
    return f"{HTTP_ERROR_CODE_PREFIX}{slug}"


def http_reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str

    @classmethod
    def from_pydantic(cls, error: Mapping[str, Any]) -> "FieldError":
        location = error.get("loc") or ()
        return cls(
            field=".".join(str(part) for part in location),
            code=str(error.get("type", "invalid")),
            message=str(error.get("msg", "")),
        )


class ApiError(Exception):
    """Error that carries the HTTP status it should be answered with."""

    def __init__(self, message: str = "", *, status_code: int = 500, code: str | None = None) -> None:
        message = message or http_reason_phrase(status_code)
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or http_error_code(status_code)


class BadRequestError(ApiError):
    def __init__(self, message: str = "Bad Request", *, code: str | None = None) -> None:
        super().__init__(message, status_code=400, code=code)


class UnauthorizedError(ApiError):
    def __init__(self, message: str = "Unauthorized", *, code: str | None = None) -> None:
        super().__init__(message, status_code=401, code=code)


class ForbiddenError(ApiError):
    def __init__(self, message: str = "Forbidden", *, code: str | None = None) -> None:
        super().__init__(message, status_code=403, code=code)


class NotFoundError(ApiError):
    def __init__(self, message: str = "Not Found", *, code: str | None = None) -> None:
        super().__init__(message, status_code=404, code=code)


class ConflictError(ApiError):
    def __init__(self, message: str = "Conflict", *, code: str | None = None) -> None:
        super().__init__(message, status_code=409, code=code)


class ValidationError(Exception):
    def __init__(
        self,
        fields: Iterable[FieldError] = (),
        message: str = VALIDATION_ERROR_MESSAGE,
        *,
        code: str = VALIDATION_ERROR_CODE,
    ) -> None:
        super().__init__(message)
        self.fields = list(fields)
        self.message = message
        self.code = code


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    HTTP = "http"
    GENERIC = "generic"


_VALIDATION_TYPES = (ValidationError, RequestValidationError, PydanticValidationError)
_HTTP_TYPES = (ApiError, StarletteHTTPException)


def error_category(exc: BaseException) -> ErrorCategory:
    if isinstance(exc, _VALIDATION_TYPES):
        return ErrorCategory.VALIDATION
    if isinstance(exc, _HTTP_TYPES):
        return ErrorCategory.HTTP
    return ErrorCategory.GENERIC


def _http_status(exc: BaseException) -> int:
    status_code = getattr(exc, "status_code", None)
    return status_code if isinstance(status_code, int) else 500


def _field_errors(exc: BaseException) -> list[FieldError]:
    if isinstance(exc, ValidationError):
        return exc.fields
    errors = exc.errors() if hasattr(exc, "errors") else []
    return [FieldError.from_pydantic(error) for error in errors]


def _validation_payload(exc: BaseException) -> ErrorPayload:
    code = exc.code if isinstance(exc, ValidationError) else VALIDATION_ERROR_CODE
    message = exc.message if isinstance(exc, ValidationError) else VALIDATION_ERROR_MESSAGE
    fields = [
        FieldErrorOut(field=row.field, code=row.code, message=row.message)
        for row in _field_errors(exc)
    ]
    return ErrorPayload(code=code, message=message, fields=fields)


def _http_payload(exc: BaseException) -> ErrorPayload:
    if isinstance(exc, ApiError):
        return ErrorPayload(code=exc.code, message=exc.message)
    status_code = _http_status(exc)
    detail = getattr(exc, "detail", None)
    if isinstance(detail, str):
        return ErrorPayload(code=http_error_code(status_code), message=detail)
    details = detail if isinstance(detail, (dict, list)) else None
    return ErrorPayload(
        code=http_error_code(status_code),
        message=http_reason_phrase(status_code),
        details=details,
    )


def _generic_payload(exc: BaseException) -> ErrorPayload:
    return ErrorPayload(code=GENERIC_ERROR_CODE, message=str(exc))


STATUS_BY_CATEGORY: dict[ErrorCategory, Callable[[BaseException], int]] = {
    ErrorCategory.VALIDATION: lambda _exc: 400,
    ErrorCategory.HTTP: _http_status,
    ErrorCategory.GENERIC: lambda _exc: 500,
}

PAYLOAD_BY_CATEGORY: dict[ErrorCategory, Callable[[BaseException], ErrorPayload]] = {
    ErrorCategory.VALIDATION: _validation_payload,
    ErrorCategory.HTTP: _http_payload,
    ErrorCategory.GENERIC: _generic_payload,
}


def _assert_exhaustive(table: Mapping[ErrorCategory, Any], name: str) -> None:
    missing = set(ErrorCategory) - set(table)
    if missing:
        raise RuntimeError(f"{name} has no entry for: {sorted(item.value for item in missing)}")


_assert_exhaustive(STATUS_BY_CATEGORY, "STATUS_BY_CATEGORY")
_assert_exhaustive(PAYLOAD_BY_CATEGORY, "PAYLOAD_BY_CATEGORY")


def status_for_error(exc: BaseException) -> int:
    return STATUS_BY_CATEGORY[error_category(exc)](exc)


def describe_error(exc: BaseException, *, include_stack_trace: bool = False) -> dict[str, Any]:
    payload = PAYLOAD_BY_CATEGORY[error_category(exc)](exc)
    if include_stack_trace:
        payload.stack_trace = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return payload.model_dump(exclude_none=True)
