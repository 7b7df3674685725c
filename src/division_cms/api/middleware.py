"""
division_cms.api.middleware

HTTP middleware for the admin surface.

Responsibilities:
- Answer CORS preflights and decorate every response with CORS headers.
- Act as the outer error boundary: unexpected faults become a generic 500.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from division_cms.observability.logging import get_logger

log = get_logger(__name__)

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type, x-admin-token"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"


class CorsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, allow_origin: str = "*") -> None:
        super().__init__(app)
        self._headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            # Preflight: empty body, headers only.
            return Response(status_code=200, headers=self._headers)

        response: Response = await call_next(request)
        response.headers.update(self._headers)
        return response


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            log.exception("unhandled_error")
            return JSONResponse(
                {"error": "Internal server error"},
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            )


# --- Module Notes -----------------------------------------------------------
# Registration order in `api.app` matters: the boundary sits inside the CORS layer
# so 500 responses still carry CORS headers.
