# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import secrets
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status

from src.config import Settings, get_settings
from src.database import get_db
from src.services.cbr_feed import CbrFeedClient

__all__ = ["get_db", "get_feed_client", "get_settings", "require_admin_password"]


async def get_feed_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[CbrFeedClient]:
    """Get a feed client configured from settings, closed after the request."""
    client = CbrFeedClient(
        base_url=settings.feed_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )
    try:
        yield client
    finally:
        await client.close()


def require_admin_password(
    x_admin_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the X-Admin-Password header against the configured password."""
    if not settings.admin_password:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin password not configured",
        )

    if x_admin_password is None or not secrets.compare_digest(
        x_admin_password.encode(), settings.admin_password.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin password",
        )
