# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency rate API endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.deps import get_db, get_feed_client, require_admin_password
from src.schemas.currency import CurrencyRateResponse, SyncResponse
from src.services.cbr_feed import CbrFeedClient
from src.services.currency_sync_service import CurrencySyncService, utc_today
from src.services.exceptions import NetworkError, ParseError, PersistenceError

router = APIRouter()


@router.get("", response_model=list[CurrencyRateResponse])
def list_rates(db: Session = Depends(get_db)) -> list[CurrencyRateResponse]:
    """Get the latest rates for all currencies."""
    service = CurrencySyncService(db)
    return [
        CurrencyRateResponse.model_validate(rate) for rate in service.get_all_rates()
    ]


@router.post(
    "/sync",
    response_model=SyncResponse,
    dependencies=[Depends(require_admin_password)],
)
async def sync_rates(
    db: Session = Depends(get_db),
    feed_client: CbrFeedClient = Depends(get_feed_client),
) -> SyncResponse:
    """Run a sync cycle for the current UTC date immediately.

    Runs independently of the background scheduler.
    """
    service = CurrencySyncService(db, feed_client)
    try:
        saved = await service.sync_rates_for_date(utc_today())
    except (NetworkError, ParseError) as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Rate feed unavailable: {e}",
        ) from e
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save rates: {e}",
        ) from e

    return SyncResponse(
        message="Sync completed",
        rates_saved=saved,
        timestamp=datetime.now(UTC),
    )


@router.get("/{num_code:int}", response_model=CurrencyRateResponse)
def get_rate_by_num_code(
    num_code: int,
    db: Session = Depends(get_db),
) -> CurrencyRateResponse:
    """Get the latest rate for a numeric currency code."""
    rate = CurrencySyncService(db).get_rate_by_num_code(num_code)
    if rate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No rate for numeric code {num_code}",
        )
    return CurrencyRateResponse.model_validate(rate)


@router.get("/{char_code}", response_model=CurrencyRateResponse)
def get_rate_by_char_code(
    char_code: str,
    db: Session = Depends(get_db),
) -> CurrencyRateResponse:
    """Get the latest rate for an alphabetic currency code (case-insensitive)."""
    rate = CurrencySyncService(db).get_rate_by_char_code(char_code)
    if rate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No rate for currency code {char_code}",
        )
    return CurrencyRateResponse.model_validate(rate)
