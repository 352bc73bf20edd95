# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency rate model holding the latest quote per currency."""

import datetime
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class CurrencyRate(Base):
    """Latest known rate for a currency, keyed by the feed's stable id.

    One row per id. A sync refreshes value, vunit_rate and date only;
    the descriptive columns keep the values from the first insert.
    """

    __tablename__ = "currency_rates"

    id: Mapped[str] = mapped_column(String(16), primary_key=True)
    num_code: Mapped[int] = mapped_column(Integer, nullable=False)
    char_code: Mapped[str | None] = mapped_column(
        String(3), nullable=True, index=True
    )
    nominal: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    value: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    vunit_rate: Mapped[Decimal] = mapped_column(Numeric(18, 8), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
