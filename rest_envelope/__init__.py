from rest_envelope.envelope import (
    ApiError,
    ApiResponse,
    BadRequestError,
    ConflictError,
    ContentKind,
    CursorPaginatedResponse,
    Envelope,
    EnvelopeFactory,
    ErrorCategory,
    FieldError,
    ForbiddenError,
    NotFoundError,
    OffsetPaginatedResponse,
    PaginatedResponse,
    UnauthorizedError,
    ValidationError,
    classify,
)

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
]
