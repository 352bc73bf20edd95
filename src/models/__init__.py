# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from src.models.base import Base
from src.models.currency_rate import CurrencyRate

__all__ = [
    "Base",
    "CurrencyRate",
]
