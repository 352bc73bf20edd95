# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Errors raised by the rate synchronization pipeline."""


class CurrencySyncError(Exception):
    """Base exception for rate synchronization errors."""


class NetworkError(CurrencySyncError):
    """Feed unreachable or answered with a non-success status."""


class ParseError(CurrencySyncError):
    """Feed payload is malformed."""


class PersistenceError(CurrencySyncError):
    """Saving a batch failed and the transaction was rolled back."""
