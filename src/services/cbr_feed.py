# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Client for the central bank daily rates feed."""

import logging
from datetime import date

import httpx

from src.config import DEFAULT_FEED_URL, DEFAULT_USER_AGENT
from src.services.exceptions import NetworkError

logger = logging.getLogger(__name__)

# The feed is served in a legacy single-byte Cyrillic encoding
FEED_ENCODING = "windows-1251"


def format_feed_date(target: date) -> str:
    """Format a date the way the feed's date_req parameter expects (dd/mm/yyyy)."""
    return target.strftime("%d/%m/%Y")


class CbrFeedClient:
    """Fetches the daily rates document for a given date."""

    def __init__(
        self,
        base_url: str = DEFAULT_FEED_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the feed client.

        Args:
            base_url: Full address of the daily rates endpoint.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header sent with every request.
        """
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_daily(self, target: date) -> str:
        """Download the rates document for a date and decode it to text.

        Args:
            target: Date the rates are requested for.

        Returns:
            The decoded XML document.

        Raises:
            NetworkError: On transport failure or a non-success status.
        """
        try:
            client = await self._get_client()
            response = await client.get(
                self.base_url,
                params={"date_req": format_feed_date(target)},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Feed returned HTTP {e.response.status_code} for {target.isoformat()}"
            )
            raise NetworkError(
                f"Feed returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch feed for {target.isoformat()}: {e}")
            raise NetworkError(f"Failed to fetch feed: {e}") from e

        return response.content.decode(FEED_ENCODING, errors="replace")
