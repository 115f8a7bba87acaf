from rest_envelope.envelope.envelope import Envelope
from rest_envelope.envelope.errors import (
    ApiError,
    BadRequestError,
    ConflictError,
    ErrorCategory,
    FieldError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    describe_error,
    error_category,
    status_for_error,
)
from rest_envelope.envelope.factory import ContentKind, EnvelopeFactory, classify
from rest_envelope.envelope.pagination import (
    CursorPaginatedResponse,
    OffsetPaginatedResponse,
    PaginatedResponse,
)
from rest_envelope.envelope.result import ApiResponse

__all__ = [
    "ApiError",
    "ApiResponse",
    "BadRequestError",
    "ConflictError",
    "ContentKind",
    "CursorPaginatedResponse",
    "Envelope",
    "EnvelopeFactory",
    "ErrorCategory",
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "OffsetPaginatedResponse",
    "PaginatedResponse",
    "UnauthorizedError",
    "ValidationError",
    "classify",
    "describe_error",
    "error_category",
    "status_for_error",
]
