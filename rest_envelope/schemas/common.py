from typing import Any

from pydantic import BaseModel


class FieldErrorOut(BaseModel):
    field: str
    code: str
    message: str


class ErrorPayload(BaseModel):
    code: str
    message: str
    fields: list[FieldErrorOut] | None = None
    details: dict[str, Any] | list[Any] | None = None
    stack_trace: list[str] | None = None


class OffsetPaginationOut(BaseModel):
    offset: int
    limit: int
    total: int | None = None


class CursorPaginationOut(BaseModel):
    before: int | str | None = None
    after: int | str | None = None
    limit: int
    total: int | None = None
