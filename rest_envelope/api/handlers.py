from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rest_envelope.api.response import respond
from rest_envelope.api.routing import get_envelope_factory
from rest_envelope.core.config import get_settings
from rest_envelope.core.logging_config import configure_logging
from rest_envelope.core.metrics import render_metrics
from rest_envelope.envelope.errors import ApiError, ValidationError
from rest_envelope.envelope.factory import EnvelopeFactory


def install_exception_handlers(app: FastAPI, factory: EnvelopeFactory | None = None) -> None:
    """Render errors raised outside endpoints (routing, request validation, dependencies) as envelopes."""
    envelope_factory = factory or get_envelope_factory()

    async def envelope_exception_handler(request: Request, exc: Exception) -> Response:
        return respond(exc, factory=envelope_factory, request=request)

    app.add_exception_handler(StarletteHTTPException, envelope_exception_handler)
    app.add_exception_handler(RequestValidationError, envelope_exception_handler)
    app.add_exception_handler(ApiError, envelope_exception_handler)
    app.add_exception_handler(ValidationError, envelope_exception_handler)
    app.add_exception_handler(PydanticValidationError, envelope_exception_handler)
    app.add_exception_handler(Exception, envelope_exception_handler)


def install_metrics_endpoint(app: FastAPI, path: str = "/metrics") -> None:
    @app.get(path, include_in_schema=False)
    async def metrics(request: Request) -> Response:
        expected_token = get_settings().metrics_token.strip()
        if expected_token and request.headers.get("X-Metrics-Token", "") != expected_token:
            return JSONResponse(
                status_code=403,
                content={"message": "Forbidden", "reason_code": "metrics_forbidden"},
            )
        payload, content_type = render_metrics()
        return Response(content=payload, media_type=content_type)


def install_envelope(app: FastAPI, factory: EnvelopeFactory | None = None) -> None:
    settings = get_settings()
    configure_logging(log_level=settings.log_level, app_env=settings.app_env)
    install_exception_handlers(app, factory)
    if settings.metrics_enabled:
        install_metrics_endpoint(app)
