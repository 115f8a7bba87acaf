from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from starlette.responses import Response

from rest_envelope.envelope.errors import describe_error


@dataclass(frozen=True)
class Envelope:
    """Uniform result of one request: a status plus data, an error, a redirect or a raw response.

    ``to_mapping`` flattens the envelope into the body the transport layer
    serializes. Flattening is pure; calling it twice yields equal output.
    """

    status_code: int = 200
    data: Any = None
    throwable: BaseException | None = None
    response: Response | None = None
    redirect_target: str | None = None
    pagination: dict[str, Any] | None = None
    return_status_code: bool = False
    return_stack_trace: bool = False

    def is_empty(self) -> bool:
        return (
            self.data is None
            and self.throwable is None
            and self.response is None
            and self.pagination is None
            and self.status_code == 204
        )

    def error(self) -> dict[str, Any] | None:
        if self.throwable is None:
            return None
        return describe_error(self.throwable, include_stack_trace=self.return_stack_trace)

    def to_mapping(self) -> dict[str, Any]:
        mapping: dict[str, Any] = {}
        if self.return_status_code:
            mapping["status_code"] = self.status_code

        if self.redirect_target is not None:
            mapping["location"] = self.redirect_target
        elif self.throwable is not None:
            mapping["error"] = self.error()
        elif self.data is not None:
            mapping["data"] = self.data
            if self.pagination is not None:
                mapping["pagination"] = dict(self.pagination)
        return mapping
