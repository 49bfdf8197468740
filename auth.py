"""
Authentication middleware resolving the calling user from an API key.
"""
from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import Config
from utils.logger import app_logger


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Checks the X-API-Key header against the configured API_KEYS and stores
    the matching user id on request.state.user_id.
    """

    EXCLUDED_PATHS = {"/", "/docs", "/openapi.json", "/redoc"}

    async def dispatch(self, request: Request, call_next):
        """
        Process each request and resolve the user.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler or 401 Unauthorized
        """
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")
        user_id = Config.parse_api_keys().get(api_key) if api_key else None

        if not user_id:
            client_host = request.client.host if request.client else "unknown"
            reason = "Missing API key" if not api_key else "Invalid API key"
            app_logger.warning(f"Unauthorized request from {client_host} - {reason}")
            return unauthorized()

        request.state.user_id = user_id
        return await call_next(request)


def unauthorized() -> PlainTextResponse:
    """401 response with the plain text body clients expect."""
    return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)


def get_user_id(request: Request) -> str | None:
    """User id resolved by AuthMiddleware, None when the request is anonymous."""
    return getattr(request.state, "user_id", None)
