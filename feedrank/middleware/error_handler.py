"""Request-scoped error handling: typed engine errors become JSON error envelopes."""

import logging
import time
import uuid
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from feedrank.utils.exceptions import FeedRankException, UnknownEngineError
from feedrank.utils.logger import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and converts exceptions into error responses.

    FeedRankException subclasses keep their own status and error code; anything
    else is reported as UnknownEngineError.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        # CORS preflight passes through untouched
        if request.method == "OPTIONS":
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await self._call(request, call_next)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={"extra_data": {"duration_ms": round((time.perf_counter() - started) * 1000, 2)}},
            )
            return response
        finally:
            request_id_var.reset(token)

    async def _call(self, request: Request, call_next: Any) -> Response:
        try:
            return await call_next(request)
        except FeedRankException as e:
            logger.warning(
                f"{request.method} {request.url.path} failed: {e.error_code} - {e.message}",
                extra={"extra_data": {"error_code": e.error_code, "details": e.details}},
            )
            return self._error_response(e)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {e}",
                extra={"extra_data": {"exception_type": type(e).__name__}},
                exc_info=True,
            )
            details = {"error": str(e)} if logger.isEnabledFor(logging.DEBUG) else {}
            return self._error_response(UnknownEngineError(details=details))

    @staticmethod
    def _error_response(error: FeedRankException) -> JSONResponse:
        content: Dict[str, Any] = {
            "success": False,
            "error": {
                "code": error.error_code,
                "message": error.message,
                "details": error.details,
            },
        }
        return JSONResponse(status_code=error.status_code, content=content)
