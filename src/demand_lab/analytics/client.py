"""GA4 Data API client used to build analytics snapshots."""

from typing import Any

import httpx
import structlog

from ..config import settings

logger = structlog.get_logger()

GA4_API_URL = "https://analyticsdata.googleapis.com/v1beta"


class GA4Client:
    """Minimal async client for the GA4 ``runReport`` endpoint."""

    def __init__(
        self,
        property_id: str,
        access_token: str,
        timeout: float | None = None,
    ):
        if not property_id or not access_token:
            raise ValueError("GA4 property ID and access token are both required.")

        self.property_id = property_id.removeprefix("properties/")
        self.access_token = access_token
        self.timeout = timeout if timeout is not None else settings.analytics_timeout
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "User-Agent": settings.user_agent,
                    "Content-Type": "application/json",
                },
            )
            logger.debug("GA4 client initialized", property_id=self.property_id)

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def run_report(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        Run a GA4 report.

        Args:
            body: ``runReport`` request body (dateRanges, metrics, dimensions, ...).

        Returns:
            The decoded JSON response.

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status.
        """
        if self._client is None:
            await self.start()

        url = f"{GA4_API_URL}/properties/{self.property_id}:runReport"
        try:
            response = await self._client.post(url, json=body)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "GA4 API error",
                status_code=e.response.status_code,
                response=e.response.text[:500],
            )
            raise

    async def __aenter__(self) -> "GA4Client":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
