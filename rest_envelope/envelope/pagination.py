from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from rest_envelope.schemas.common import CursorPaginationOut, OffsetPaginationOut


class PaginatedResponse(ABC):
    """A page of items plus the descriptor clients need to fetch the next one."""

    def __init__(self, data: Any, limit: int, total: int | None = None) -> None:
        self.data = data
        self.limit = limit
        self.total = total

    @abstractmethod
    def to_pagination(self) -> dict[str, Any]:
        raise NotImplementedError


class OffsetPaginatedResponse(PaginatedResponse):
    def __init__(self, data: Any, offset: int, limit: int, total: int | None = None) -> None:
        super().__init__(data, limit, total)
        self.offset = offset

    def to_pagination(self) -> dict[str, Any]:
        return OffsetPaginationOut(offset=self.offset, limit=self.limit, total=self.total).model_dump()


class CursorPaginatedResponse(PaginatedResponse):
    def __init__(
        self,
        data: Any,
        before: int | str | None,
        after: int | str | None,
        limit: int,
        total: int | None = None,
    ) -> None:
        super().__init__(data, limit, total)
        self.before = before
        self.after = after

    def to_pagination(self) -> dict[str, Any]:
        return CursorPaginationOut(
            before=self.before,
            after=self.after,
            limit=self.limit,
            total=self.total,
        ).model_dump()
