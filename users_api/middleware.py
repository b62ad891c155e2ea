"""Cross-cutting request middleware: error recovery, token auth and logging."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from .security import TokenAuthenticator

request_logger = logging.getLogger("users_api.requests")
error_logger = logging.getLogger("users_api.errors")

INTERNAL_ERROR_BODY = {"error": "Internal server error."}
UNAUTHORIZED_BODY = {"error": "Unauthorized"}


class ErrorRecoveryMiddleware(BaseHTTPMiddleware):
    """Turn any exception raised further down the chain into a generic 500."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception:
            error_logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=INTERNAL_ERROR_BODY,
            )


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests whose ``Authorization`` header carries no allowed token."""

    def __init__(self, app: ASGIApp, authenticator: TokenAuthenticator) -> None:
        super().__init__(app)
        self._authenticator = authenticator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._authenticator.authenticate(request.headers.get("authorization")):
            return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=UNAUTHORIZED_BODY)
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_logger.info("Request: %s %s", request.method, request.url.path)
        response = await call_next(request)
        request_logger.info("Response: %s", response.status_code)
        return response


def install_middleware(app: FastAPI, authenticator: TokenAuthenticator) -> None:
    """Register the request pipeline on ``app``.

    Starlette runs the most recently added middleware first, so the stages
    are added innermost first: logging, then auth, then error recovery.
    """

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TokenAuthMiddleware, authenticator=authenticator)
    app.add_middleware(ErrorRecoveryMiddleware)


__all__ = [
    "ErrorRecoveryMiddleware",
    "INTERNAL_ERROR_BODY",
    "RequestLoggingMiddleware",
    "TokenAuthMiddleware",
    "UNAUTHORIZED_BODY",
    "install_middleware",
]
