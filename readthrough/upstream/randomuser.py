"""Client for the randomuser.me API.

The upstream call this service exists to cache: every request fetches a
fresh batch of generated user records over the network.
"""

import logging
from typing import Any

import httpx

from readthrough.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

# randomuser.me caps a single request at 5000 results
MAX_RESULTS = 5000


class RandomUserClient:
    """Fetch generated user records.

    Example:
        >>> client = RandomUserClient()
        >>> users = await client.fetch_users(3)
        >>> len(users)
        3
    """

    def __init__(
        self,
        api_url: str = "https://randomuser.me/api/",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            api_url: API endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def fetch_users(self, n: int = 1) -> list[dict[str, Any]]:
        """Fetch ``n`` user records.

        Args:
            n: Number of users, 1..MAX_RESULTS

        Returns:
            List of user records as returned by the API

        Raises:
            UpstreamError: If the API request fails or the body is malformed
        """
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                response = await client.get(self.api_url, params={"results": n})
                response.raise_for_status()
                body = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(
                    f"randomuser API error: {e.response.status_code} - {e.response.text}"
                )
                raise UpstreamError(
                    f"randomuser API failed: {e.response.status_code}",
                    {"status_code": e.response.status_code},
                ) from e
            except httpx.RequestError as e:
                logger.error(f"randomuser API request error: {e}")
                raise UpstreamError(f"randomuser API request failed: {e}") from e
            except ValueError as e:
                logger.error(f"randomuser API returned invalid JSON: {e}")
                raise UpstreamError("randomuser API returned invalid JSON") from e

        if not isinstance(body, dict) or not isinstance(body.get("results"), list):
            raise UpstreamError(
                f"Unexpected randomuser response format: {type(body).__name__}"
            )

        users: list[dict[str, Any]] = body["results"]
        return users
