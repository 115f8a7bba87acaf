import os
os.environ["APP_ENV"] = "test"

import logging
from typing import Generator

import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.responses import PlainTextResponse, RedirectResponse

from rest_envelope.api.handlers import install_exception_handlers, install_metrics_endpoint
from rest_envelope.api.routing import EnvelopeRouter, get_envelope_factory
from rest_envelope.core.config import get_settings
from rest_envelope.envelope import (
    ApiResponse,
    Envelope,
    EnvelopeFactory,
    FieldError,
    NotFoundError,
    OffsetPaginatedResponse,
    ValidationError,
)


@pytest.fixture(autouse=True)
def _reset_cached_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    get_envelope_factory.cache_clear()
    yield
    get_settings.cache_clear()
    get_envelope_factory.cache_clear()


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Generator[None, None, None]:
    logger = logging.getLogger("rest_envelope")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def factory() -> EnvelopeFactory:
    return EnvelopeFactory(Envelope())


class WidgetIn(BaseModel):
    name: str
    size: int = 1


def _require_admin() -> None:
    raise HTTPException(status_code=403, detail="Admins only")


def _load_gadget(gadget_id: int) -> dict:
    if gadget_id == 404:
        raise NotFoundError("Gadget not found")
    if gadget_id == 1:
        raise ValidationError([FieldError(field="gadget_id", code="reserved", message="Gadget id is reserved.")])
    if gadget_id == 2:
        WidgetIn.model_validate({})
    return {"id": gadget_id}


class ReportEndpoint:
    async def __call__(self, year: int = 2024):
        return {"year": year}


def build_router(factory: EnvelopeFactory) -> EnvelopeRouter:
    router = EnvelopeRouter(factory=factory, prefix="/api/v1")

    @router.get("/widgets")
    def list_widgets():
        return OffsetPaginatedResponse(["a", "b"], offset=1, limit=2, total=3)

    @router.get("/widgets/{widget_id}")
    async def get_widget(widget_id: int) -> dict:
        if widget_id == 404:
            raise NotFoundError("Widget not found")
        return {"id": widget_id}

    @router.post("/widgets")
    async def create_widget(payload: WidgetIn):
        if payload.name == "taken":
            raise ValidationError([FieldError(field="name", code="unique", message="Name already in use.")])
        return ApiResponse(data=payload.model_dump(), status_code=201)

    @router.delete("/widgets/{widget_id}")
    def delete_widget(widget_id: int):
        return None

    @router.get("/greeting")
    def greeting():
        return "hello"

    @router.get("/legacy")
    def legacy():
        return RedirectResponse("http://example.com", status_code=301)

    @router.get("/raw")
    def raw():
        return PlainTextResponse("foo")

    @router.get("/boom")
    def boom():
        raise RuntimeError("boom")

    @router.get("/admin", dependencies=[Depends(_require_admin)])
    def admin():
        return {"secret": True}

    @router.get("/gadgets/{gadget_id}")
    def get_gadget(gadget: dict = Depends(_load_gadget)):
        return gadget

    @router.get("/private")
    def private():
        raise HTTPException(status_code=401, detail="Token required", headers={"WWW-Authenticate": "Bearer"})

    router.add_api_route("/reports", ReportEndpoint(), methods=["GET"])

    return router


def build_app(factory: EnvelopeFactory) -> FastAPI:
    app = FastAPI()
    app.include_router(build_router(factory))
    install_exception_handlers(app, factory)
    install_metrics_endpoint(app)
    return app


@pytest.fixture
def app(factory: EnvelopeFactory) -> FastAPI:
    return build_app(factory)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_builder():
    return build_app
