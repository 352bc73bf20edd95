# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency rate synchronization and lookup service."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from sqlalchemy.orm import Session

from src.config import Settings
from src.models.currency_rate import CurrencyRate
from src.services import rate_store
from src.services.cbr_feed import CbrFeedClient
from src.services.exceptions import CurrencySyncError
from src.services.rate_parser import parse_daily_rates

logger = logging.getLogger(__name__)

CHAR_CODE_LENGTH = 3


def utc_today() -> date:
    """Get the current UTC calendar date, the date every sync requests."""
    return datetime.now(UTC).date()


class CurrencySyncService:
    """Service for syncing rates from the feed and reading the snapshot."""

    def __init__(self, db: Session, feed_client: CbrFeedClient | None = None) -> None:
        """Initialize the service.

        Args:
            db: Database session for the snapshot store.
            feed_client: Feed client to use. When omitted the service creates
                one with default settings and closes it in close().
        """
        self.db = db
        self._owns_client = feed_client is None
        self.feed_client = feed_client or CbrFeedClient()

    async def close(self) -> None:
        """Close the feed client if this service created it."""
        if self._owns_client:
            await self.feed_client.close()

    def get_all_rates(self) -> list[CurrencyRate]:
        """Get the latest snapshot of all rates."""
        return rate_store.get_all_latest(self.db)

    def get_rate_by_num_code(self, num_code: int) -> CurrencyRate | None:
        """Get the latest rate for a numeric code, or None."""
        return rate_store.get_by_num_code(self.db, num_code)

    def get_rate_by_char_code(self, char_code: str) -> CurrencyRate | None:
        """Get the latest rate for an alphabetic code, or None.

        Codes that are not exactly three non-blank characters are rejected
        without querying the store.
        """
        if len(char_code) != CHAR_CODE_LENGTH or not char_code.strip():
            return None
        return rate_store.get_by_char_code(self.db, char_code.upper())

    async def sync_rates_for_date(self, target: date) -> int:
        """Run one fetch, parse and save cycle.

        Re-running for the same date leaves the store in the same state.

        Args:
            target: Date to request rates for.

        Returns:
            Number of rates saved.

        Raises:
            NetworkError: If the feed cannot be fetched.
            ParseError: If the feed document is malformed.
            PersistenceError: If saving the batch fails.
        """
        try:
            text = await self.feed_client.fetch_daily(target)
            rates = parse_daily_rates(text)
            rate_date = rates[0].date.isoformat() if rates else target.isoformat()
            logger.info(f"Parsed {len(rates)} rates for {rate_date}")
            return rate_store.save_batch(self.db, rates)
        except CurrencySyncError as e:
            logger.error(f"Error syncing rates for {target.isoformat()}: {e}")
            raise


async def run_sync_cycle(
    session_factory: Callable[[], Session],
    settings: Settings,
    target: date | None = None,
) -> int:
    """Run one sync cycle with its own session and feed client.

    Used by both the scheduler and the manual trigger. The session and
    the HTTP client are released on every exit path.

    Args:
        session_factory: Callable returning a new database session.
        settings: Application settings with the feed address.
        target: Date to sync, the current UTC date when omitted.

    Returns:
        Number of rates saved.
    """
    db = session_factory()
    feed_client = CbrFeedClient(
        base_url=settings.feed_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )
    service = CurrencySyncService(db, feed_client)
    try:
        return await service.sync_rates_for_date(target or utc_today())
    finally:
        await feed_client.close()
        db.close()
