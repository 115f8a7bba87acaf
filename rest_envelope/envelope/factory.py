from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from starlette.responses import RedirectResponse, Response

from rest_envelope.envelope.envelope import Envelope
from rest_envelope.envelope.errors import status_for_error
from rest_envelope.envelope.pagination import PaginatedResponse
from rest_envelope.envelope.result import ApiResponse

if TYPE_CHECKING:
    from rest_envelope.core.config import Settings


class ContentKind(str, Enum):
    ERROR = "error"
    REDIRECT = "redirect"
    RESPONSE = "response"
    RESULT = "result"
    PAGINATED = "paginated"
    EMPTY = "empty"
    VALUE = "value"


# Order matters: RedirectResponse is a Response, and first match wins.
_MATCHERS: tuple[tuple[ContentKind, Callable[[Any], bool]], ...] = (
    (ContentKind.ERROR, lambda content: isinstance(content, BaseException)),
    (ContentKind.REDIRECT, lambda content: isinstance(content, RedirectResponse)),
    (ContentKind.RESPONSE, lambda content: isinstance(content, Response)),
    (ContentKind.RESULT, lambda content: isinstance(content, ApiResponse)),
    (ContentKind.PAGINATED, lambda content: isinstance(content, PaginatedResponse)),
    (ContentKind.EMPTY, lambda content: content is None),
)


def classify(content: Any) -> ContentKind:
    for kind, matches in _MATCHERS:
        if matches(content):
            return kind
    return ContentKind.VALUE


_CLEARED: dict[str, Any] = {
    "status_code": 200,
    "data": None,
    "throwable": None,
    "response": None,
    "redirect_target": None,
    "pagination": None,
}


def _populate(prototype: Envelope, **fields: Any) -> Envelope:
    return replace(prototype, **{**_CLEARED, **fields})


def _response_body(response: Response) -> Any:
    body = getattr(response, "body", None)
    if isinstance(body, (bytes, bytearray, memoryview)):
        if not body:
            return None
        return bytes(body).decode(response.charset, errors="replace")
    return body


def _from_error(prototype: Envelope, content: BaseException) -> Envelope:
    return _populate(prototype, status_code=status_for_error(content), throwable=content)


def _from_redirect(prototype: Envelope, content: RedirectResponse) -> Envelope:
    return _populate(
        prototype,
        status_code=content.status_code,
        redirect_target=content.headers.get("location"),
    )


def _from_response(prototype: Envelope, content: Response) -> Envelope:
    return _populate(
        prototype,
        status_code=content.status_code,
        data=_response_body(content),
        response=content,
    )


def _from_result(prototype: Envelope, content: ApiResponse) -> Envelope:
    return _populate(prototype, status_code=content.status_code, data=content.data)


def _from_paginated(prototype: Envelope, content: PaginatedResponse) -> Envelope:
    return _populate(prototype, data=content.data, pagination=content.to_pagination())


def _from_empty(prototype: Envelope, _content: None) -> Envelope:
    return _populate(prototype, status_code=204)


def _from_value(prototype: Envelope, content: Any) -> Envelope:
    return _populate(prototype, data=content)


_BUILDERS: dict[ContentKind, Callable[[Envelope, Any], Envelope]] = {
    ContentKind.ERROR: _from_error,
    ContentKind.REDIRECT: _from_redirect,
    ContentKind.RESPONSE: _from_response,
    ContentKind.RESULT: _from_result,
    ContentKind.PAGINATED: _from_paginated,
    ContentKind.EMPTY: _from_empty,
    ContentKind.VALUE: _from_value,
}

_missing_builders = set(ContentKind) - set(_BUILDERS)
if _missing_builders:
    raise RuntimeError(f"No envelope builder for: {sorted(kind.value for kind in _missing_builders)}")


class EnvelopeFactory:
    def __init__(self, prototype: Envelope | None = None) -> None:
        self.prototype = prototype or Envelope()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EnvelopeFactory":
        return cls(
            Envelope(
                return_status_code=settings.return_status_code,
                return_stack_trace=settings.return_stack_trace,
            )
        )

    def create_from_content(self, content: Any) -> Envelope:
        return _BUILDERS[classify(content)](self.prototype, content)
