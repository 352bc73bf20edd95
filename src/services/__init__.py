# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Services package."""
from src.services import (
    cbr_feed,
    currency_sync_service,
    rate_parser,
    rate_store,
    sync_scheduler,
)

__all__ = [
    "cbr_feed",
    "currency_sync_service",
    "rate_parser",
    "rate_store",
    "sync_scheduler",
]
