"""
Request Orchestrator - HTTP Transport

Async wrapper around httpx used by the request executor.
Returns the status code and decoded body of every response; only
network-level failures raise.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from shared.config import Settings
from shared.schemas import TransportResponse

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Performs HTTP requests for the orchestrator.

    Non-2xx responses are returned like any other response so the caller
    decides what counts as a failure. Network errors surface as
    ``httpx.HTTPError`` subclasses.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL that relative request URLs are joined to
            timeout: Timeout in seconds for each request
            headers: Default headers sent with every request
            transport: Optional httpx transport (e.g. httpx.MockTransport)
            client: Optional preconfigured client; overrides the other options
        """
        self.base_url = base_url
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport
        )

        logger.debug(f"HTTP transport initialized: base_url={base_url!r}, timeout={timeout}")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "HttpTransport":
        """Build a transport from loaded settings"""
        return cls(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            **kwargs
        )

    async def request(
        self,
        method: str,
        url: str,
        params: Any = None,
        data: Any = None
    ) -> TransportResponse:
        """
        Issue one HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL, or path relative to base_url
            params: Query parameters
            data: Request body; str/bytes are sent as-is, anything else as JSON

        Returns:
            TransportResponse with status code and decoded body

        Raises:
            httpx.HTTPError: If the request could not be completed
        """
        kwargs: Dict[str, Any] = {"params": params}
        if isinstance(data, (str, bytes)):
            kwargs["content"] = data
        elif data is not None:
            kwargs["json"] = data

        response = await self.client.request(method.upper(), url, **kwargs)

        logger.debug(f"{method.upper()} {response.request.url} -> {response.status_code}")

        return TransportResponse(
            status=response.status_code,
            data=self.decode_body(response),
            headers=dict(response.headers)
        )

    @staticmethod
    def decode_body(response: httpx.Response) -> Any:
        """Decode a JSON body, falling back to text; empty bodies become None"""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        """Close the underlying client"""
        await self.client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
