"""Transport protocol.

Defines the request/response interface the services use to reach the
Langfuse API. Authentication, connection pooling and wire encoding live
behind it.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Protocol for the HTTP transport.

    Example:
        ```python
        transport: Transport = HttpxTransport.create(settings)
        payload = await transport.send("GET", "/api/public/v2/prompts/my-prompt")
        ```
    """

    async def send(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> Any:
        """Perform one request.

        Args:
            method: HTTP method
            path: Path relative to the API base URL, query string included
            body: Optional JSON body

        Returns:
            The decoded JSON payload, or None for an empty body

        Raises:
            LangfuseApiError: On any non-2xx status or transport failure
        """
        ...

    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        ...
