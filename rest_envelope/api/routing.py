from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.datastructures import DefaultPlaceholder
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool

from rest_envelope.api.response import respond
from rest_envelope.core.config import get_settings
from rest_envelope.envelope.factory import EnvelopeFactory


_REQUEST_PARAM = "envelope_request_"


@lru_cache
def get_envelope_factory() -> EnvelopeFactory:
    return EnvelopeFactory.from_settings(get_settings())


def _is_coroutine_callable(endpoint: Callable[..., Any]) -> bool:
    if inspect.isroutine(endpoint):
        return inspect.iscoroutinefunction(endpoint)
    if inspect.isclass(endpoint):
        return False
    return inspect.iscoroutinefunction(getattr(endpoint, "__call__", None))


def _with_request_parameter(signature: inspect.Signature) -> inspect.Signature:
    parameters = list(signature.parameters.values())
    request_parameter = inspect.Parameter(_REQUEST_PARAM, inspect.Parameter.KEYWORD_ONLY, annotation=Request)
    position = len(parameters)
    if parameters and parameters[-1].kind is inspect.Parameter.VAR_KEYWORD:
        position -= 1
    parameters.insert(position, request_parameter)
    return signature.replace(parameters=parameters, return_annotation=inspect.Signature.empty)


def envelope_endpoint(endpoint: Callable[..., Any], factory: EnvelopeFactory) -> Callable[..., Any]:
    """Wrap an endpoint so whatever it returns or raises is rendered as an envelope.

    The wrapper exposes the endpoint's parameters (so FastAPI still resolves
    dependencies and request data) plus the current request, and no return
    annotation, since it always returns a ready response.
    """
    if getattr(endpoint, "__envelope_endpoint__", False):
        return endpoint
    is_coroutine = _is_coroutine_callable(endpoint)

    async def wrapper(*args: Any, **kwargs: Any) -> Response:
        request = kwargs.pop(_REQUEST_PARAM, None)
        try:
            if is_coroutine:
                content = await endpoint(*args, **kwargs)
            else:
                content = await run_in_threadpool(endpoint, *args, **kwargs)
                if inspect.isawaitable(content):
                    content = await content
        except Exception as exc:
            content = exc
        return respond(content, factory=factory, request=request)

    wrapper.__signature__ = _with_request_parameter(inspect.signature(endpoint, eval_str=True))  # type: ignore[attr-defined]
    wrapper.__name__ = getattr(endpoint, "__name__", type(endpoint).__name__)
    wrapper.__qualname__ = getattr(endpoint, "__qualname__", type(endpoint).__qualname__)
    wrapper.__doc__ = endpoint.__doc__
    wrapper.__module__ = getattr(endpoint, "__module__", wrapper.__module__)
    wrapper.__envelope_endpoint__ = True  # type: ignore[attr-defined]
    return wrapper


class EnvelopeRoute(APIRoute):
    factory: EnvelopeFactory | None = None

    def __init__(self, path: str, endpoint: Callable[..., Any], *, response_model: Any = None, **kwargs: Any) -> None:
        if isinstance(response_model, DefaultPlaceholder):
            response_model = None
        factory = self.factory or get_envelope_factory()
        super().__init__(path, envelope_endpoint(endpoint, factory), response_model=response_model, **kwargs)


class EnvelopeRouter(APIRouter):
    def __init__(self, *, factory: EnvelopeFactory | None = None, **kwargs: Any) -> None:
        if factory is not None:
            kwargs["route_class"] = type("EnvelopeRoute", (EnvelopeRoute,), {"factory": factory})
        else:
            kwargs.setdefault("route_class", EnvelopeRoute)
        super().__init__(**kwargs)
