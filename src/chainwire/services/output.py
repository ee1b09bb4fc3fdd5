"""Output and exception renderers for the HTTP dispatcher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from chainwire.core.errors import ResolutionError
from chainwire.core.models import NO_RESULT

if TYPE_CHECKING:
    from chainwire.web.request import HttpRequestInfo

LOGGER = logging.getLogger(__name__)


class JsonOutput:
    """Render a controller result as a JSON response."""

    def handle(self, request: HttpRequestInfo, result: Any) -> JSONResponse:
        payload = None if result is NO_RESULT else result
        return JSONResponse(content=jsonable_encoder(payload))


class JsonException:
    """Render an uncaught exception as a JSON error body."""

    def handle(self, error: Exception, request: HttpRequestInfo) -> JSONResponse:
        status_code = getattr(error, "status_code", None)
        if status_code is None:
            status_code = (
                http_status.HTTP_404_NOT_FOUND
                if isinstance(error, ResolutionError)
                else http_status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        LOGGER.error("%s %s failed: %s", request.method, request.uri, error)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(error).__name__, "detail": str(error)},
        )


__all__ = ["JsonException", "JsonOutput"]
