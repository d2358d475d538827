"""Inbound request logging middleware."""

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


def get_client_address(request: Request) -> str:
    """Return ``host:port`` of the connected client, or "unknown"."""
    if request.client:
        return f"{request.client.host}:{request.client.port}"
    return "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every inbound request before it reaches a route."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Log remote address, method, URL, content length, host and protocol.

        Args:
            request: The incoming request.
            call_next: The next middleware/handler.

        Returns:
            The downstream response, unchanged.
        """
        http_version = request.scope.get("http_version", "1.1")
        logger.info(
            f"{get_client_address(request)} {request.method} {request.url.path} "
            f"{request.headers.get('content-length', '0')} {request.headers.get('host', '')} HTTP/{http_version}"
        )
        return await call_next(request)
