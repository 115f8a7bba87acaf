from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from rest_envelope.core.metrics import envelope_responses_total
from rest_envelope.envelope.envelope import Envelope
from rest_envelope.envelope.factory import EnvelopeFactory, classify


logger = logging.getLogger("rest_envelope.api")

_BODYLESS_STATUS_CODES = {204, 304}


def render_envelope(envelope: Envelope) -> Response:
    if envelope.response is not None:
        return envelope.response
    if envelope.status_code in _BODYLESS_STATUS_CODES:
        return Response(status_code=envelope.status_code)
    headers: dict[str, str] = {}
    if isinstance(envelope.throwable, StarletteHTTPException) and envelope.throwable.headers:
        headers.update(envelope.throwable.headers)
    if envelope.redirect_target is not None:
        headers["location"] = envelope.redirect_target
    return JSONResponse(
        status_code=envelope.status_code,
        content=jsonable_encoder(envelope.to_mapping()),
        headers=headers or None,
    )


def _log_error(envelope: Envelope, extra: dict[str, Any]) -> None:
    error = envelope.error() or {}
    extra = {**extra, "error_code": error.get("code")}
    if envelope.status_code >= 500:
        logger.error("envelope.error", exc_info=envelope.throwable, extra=extra)
    else:
        logger.warning("envelope.error", extra=extra)


def respond(content: Any, *, factory: EnvelopeFactory, request: Request | None = None) -> Response:
    kind = classify(content)
    envelope = factory.create_from_content(content)
    extra: dict[str, Any] = {"content_kind": kind.value, "status_code": envelope.status_code}
    if request is not None:
        extra.update(method=request.method, path=request.url.path)
    if envelope.throwable is not None:
        _log_error(envelope, extra)
    else:
        logger.debug("envelope.rendered", extra=extra)
    envelope_responses_total.labels(kind=kind.value, status=str(envelope.status_code)).inc()
    return render_envelope(envelope)
