# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency rate schemas."""
import datetime
from decimal import Decimal

from pydantic import BaseModel


class CurrencyRateResponse(BaseModel):
    """Schema for a currency rate response."""

    id: str
    num_code: int
    char_code: str | None
    nominal: int
    name: str | None
    value: Decimal
    vunit_rate: Decimal
    date: datetime.date

    model_config = {"from_attributes": True}


class SyncResponse(BaseModel):
    """Response after a manually triggered sync."""

    message: str
    rates_saved: int
    timestamp: datetime.datetime
