"""httpx-based implementation of the Transport protocol.

Talks to the Langfuse public API with HTTP basic auth (public key as user,
secret key as password). One request per call: no retries.

Error mapping:
- 2xx: decoded JSON body (None when empty)
- 401/403: AuthenticationError
- 404: NotFoundError
- other 4xx: ClientError
- 5xx: ServerError
- no response (connect, timeout, protocol): TransportFailureError
- 2xx with a body that is not JSON: ResponseDecodeError
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from langfuse_client.config import USER_AGENT, Settings, get_settings
from langfuse_client.errors import ResponseDecodeError, TransportFailureError, error_for_status

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class HttpxTransport:
    """Async HTTP transport backed by ``httpx.AsyncClient``.

    This class satisfies the Transport protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        transport = HttpxTransport.create(settings)
        payload = await transport.send("GET", "/api/public/v2/prompts/greeting")
        await transport.close()
        ```
    """

    def __init__(
        self,
        base_url: str,
        public_key: str,
        secret_key: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        owns_client: bool | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: API base URL, e.g. https://cloud.langfuse.com
            public_key: Langfuse public key
            secret_key: Langfuse secret key
            timeout: Request timeout in seconds.
            client: Pre-built AsyncClient (tests, custom pools). Its base_url
                is used as-is; credentials are sent per request.
            owns_client: Whether close() closes the client. Defaults to True
                only for clients created here.
        """
        self._base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(public_key, secret_key)
        self._timeout = timeout
        self._owns_client = client is None if owns_client is None else owns_client
        self._client = client
        self._closed = False

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "HttpxTransport":
        """Factory method to create HttpxTransport from settings.

        Args:
            settings: Client settings. If None, uses environment settings.
            client: Optional pre-built AsyncClient.

        Returns:
            Configured HttpxTransport
        """
        settings = settings or get_settings()
        settings.validate_credentials()
        return cls(
            base_url=settings.base_url,
            public_key=settings.public_key or "",
            secret_key=settings.secret_key or "",
            timeout=settings.timeout,
            client=client,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
            )
        return self._client

    @property
    def base_url(self) -> str:
        return self._base_url

    async def send(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> Any:
        """Perform one request against the API.

        Args:
            method: HTTP method
            path: Path relative to the base URL, already percent-encoded,
                query string included
            body: Optional JSON body

        Returns:
            The decoded JSON payload, or None for an empty body

        Raises:
            LangfuseApiError: On any non-2xx status or transport failure
        """
        if self._closed:
            raise TransportFailureError("Transport is closed")

        try:
            response = await self.client.request(
                method,
                path,
                json=dict(body) if body is not None else None,
                auth=self._auth,
            )
        except httpx.TransportError as e:
            logger.debug("%s %s failed before a response: %s", method, path, e)
            raise TransportFailureError(
                f"Langfuse API request {method} {path} failed: {e}",
                details={"method": method, "path": path},
            ) from e

        if not response.is_success:
            raise error_for_status(
                response.status_code,
                _decode_body(response),
                f"Langfuse API request {method} {path} failed with status {response.status_code}",
            )

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(
                f"Langfuse API returned a non-JSON body for {method} {path}",
                response.status_code,
                response.text,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client if this transport owns it.

        Should be called when shutting down the application.
        """
        if self._closed:
            return
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
