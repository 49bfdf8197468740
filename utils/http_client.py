"""
HTTP client utilities with connection pooling.
Provides a reusable httpx client for openFDA requests.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the shared httpx client with connection pooling."""

    _fda_client: httpx.AsyncClient | None = None

    @classmethod
    def get_fda_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for openFDA requests.

        Features:
        - Connection pooling (reuses TCP connections)
        - HTTP/2 when the server offers it

        Returns:
            Configured httpx.AsyncClient for openFDA requests
        """
        if cls._fda_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._fda_client = httpx.AsyncClient(
                timeout=Config.FDA_TIMEOUT,
                headers={"Accept": "application/json"},
                limits=limits,
                http2=True
            )

        return cls._fda_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._fda_client is not None:
            await cls._fda_client.aclose()
            cls._fda_client = None
