# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pydantic schemas package."""

from src.schemas.common import HealthResponse
from src.schemas.currency import CurrencyRateResponse, SyncResponse

__all__ = [
    "CurrencyRateResponse",
    "HealthResponse",
    "SyncResponse",
]
