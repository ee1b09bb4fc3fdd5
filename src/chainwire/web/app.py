"""FastAPI application dispatching HTTP requests to services."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Request, status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.responses import Response

from chainwire.core import AppSettings, load_app_settings
from chainwire.core.catalog import ServiceCatalog
from chainwire.core.config import HttpSettings
from chainwire.core.errors import ResolutionError
from chainwire.core.models import NO_RESULT
from chainwire.core.registry import Registry

from .request import HttpRequestInfo

LOGGER = logging.getLogger(__name__)

DISPATCH_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


class HttpError(Exception):
    """Error carrying the HTTP status it should be reported with."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def controller_name_for(path: str, http: HttpSettings) -> str:
    """Map ``/user/create`` to ``user.create`` (prefixed when configured)."""
    segments = [segment for segment in path.strip("/").split("/") if segment]
    name = ".".join(segments) if segments else http.index_service
    if http.controller_prefix:
        return f"{http.controller_prefix}.{name}"
    return name


def create_app(catalog: ServiceCatalog, settings: AppSettings | None = None) -> FastAPI:
    """Create the dispatcher application for ``catalog``."""
    app_settings = settings or load_app_settings()
    http = app_settings.http
    app = FastAPI(title="chainwire")

    @app.api_route("/{path:path}", methods=DISPATCH_METHODS)
    async def dispatch(request: Request, path: str) -> Response:
        raw_input = await request.body()
        info = HttpRequestInfo.from_request(request, raw_input, hmac_key=http.hmac_key)
        controller = controller_name_for(path, http)
        response = await asyncio.to_thread(
            _dispatch, catalog, app_settings, controller, info, dict(request.query_params)
        )
        if info.tails.tasks:
            response.background = info.tails
        return response

    return app


def _dispatch(
    catalog: ServiceCatalog,
    settings: AppSettings,
    controller: str,
    info: HttpRequestInfo,
    query: dict[str, str],
) -> Response:
    http = settings.http
    registry: Registry | None = None
    try:
        # one registry per request; the catalog and its directive cache are shared
        registry = Registry.from_settings(catalog, settings.registry)
        try:
            registry.init(controller)
        except ResolutionError as exc:
            msg = f"Attempted to load unknown controller service ({controller})"
            raise HttpError(msg, http_status.HTTP_404_NOT_FOUND) from exc

        try:
            input_data = info.parse_input(query)
        except ValueError as exc:
            raise HttpError("Malformed request body", http_status.HTTP_400_BAD_REQUEST) from exc

        result = registry.call(controller, (info,), input_data)
        if http.output_service:
            result = registry.exec(http.output_service, info, result)
        return _as_response(result)

    # anything escaping the controller or output service is handed to the exception service
    except Exception as exc:  # pylint: disable=broad-except
        if http.exception_service and registry is not None:
            try:
                return _as_response(registry.exec(http.exception_service, exc, info))
            except Exception as render_exc:  # pylint: disable=broad-except
                LOGGER.error(
                    "Exception service %s failed while handling %s: %r",
                    http.exception_service,
                    controller,
                    render_exc,
                )
        LOGGER.error("Dispatch of %s failed", controller, exc_info=exc)
        return _error_response(exc)


def _as_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    payload = None if result is NO_RESULT else result
    return JSONResponse(content=jsonable_encoder(payload))


def _error_response(exc: Exception) -> JSONResponse:
    status_code = getattr(exc, "status_code", http_status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = str(exc) if isinstance(exc, HttpError) else "Internal server error"
    return JSONResponse(status_code=status_code, content={"detail": detail})


__all__ = ["HttpError", "controller_name_for", "create_app"]
