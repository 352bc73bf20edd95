# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Snapshot store for the latest currency rates."""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.currency_rate import CurrencyRate
from src.services.exceptions import PersistenceError
from src.services.rate_parser import RateRecord

logger = logging.getLogger(__name__)

# Columns a sync is allowed to refresh on an existing row
REFRESHED_COLUMNS = ("value", "vunit_rate", "date")

_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def get_all_latest(db: Session) -> list[CurrencyRate]:
    """Get all rates quoted for the most recent date in the store."""
    latest_date = select(func.max(CurrencyRate.date)).scalar_subquery()
    return (
        db.query(CurrencyRate)
        .filter(CurrencyRate.date == latest_date)
        .order_by(CurrencyRate.char_code, CurrencyRate.id)
        .all()
    )


def get_by_num_code(db: Session, num_code: int) -> CurrencyRate | None:
    """Get the most recent rate for a numeric currency code."""
    return (
        db.query(CurrencyRate)
        .filter(CurrencyRate.num_code == num_code)
        .order_by(CurrencyRate.date.desc())
        .first()
    )


def get_by_char_code(db: Session, char_code: str) -> CurrencyRate | None:
    """Get the most recent rate for an alphabetic currency code.

    The code is compared as stored, so callers pass it upper-cased.
    """
    return (
        db.query(CurrencyRate)
        .filter(CurrencyRate.char_code == char_code)
        .order_by(CurrencyRate.date.desc())
        .first()
    )


def _record_values(record: RateRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "num_code": record.num_code,
        "char_code": record.char_code,
        "nominal": record.nominal,
        "name": record.name,
        "value": record.value,
        "vunit_rate": record.vunit_rate,
        "date": record.date,
    }


def _upsert_native(db: Session, insert_fn: Any, rows: Iterable[dict[str, Any]]) -> None:
    for values in rows:
        stmt = insert_fn(CurrencyRate).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={column: stmt.excluded[column] for column in REFRESHED_COLUMNS},
        )
        db.execute(stmt)


def _upsert_orm(db: Session, rows: Iterable[dict[str, Any]]) -> None:
    for values in rows:
        existing = db.get(CurrencyRate, values["id"])
        if existing:
            for column in REFRESHED_COLUMNS:
                setattr(existing, column, values[column])
        else:
            db.add(CurrencyRate(**values))
        db.flush()


def save_batch(db: Session, records: Iterable[RateRecord]) -> int:
    """Upsert a batch of rates in a single transaction.

    New ids are inserted. Existing ids get value, vunit_rate and date
    overwritten; num_code, char_code, nominal and name stay as first stored.
    Either the whole batch is committed or nothing is.

    Args:
        db: Database session
        records: Parsed rate records. A repeated id keeps its last occurrence.

    Returns:
        Number of distinct ids written

    Raises:
        PersistenceError: If any statement or the commit fails.
    """
    rows: dict[str, dict[str, Any]] = {}
    for record in records:
        rows[record.id] = _record_values(record)

    if not rows:
        return 0

    dialect = db.get_bind().dialect.name
    insert_fn = _UPSERT_INSERTS.get(dialect)
    try:
        if insert_fn is not None:
            _upsert_native(db, insert_fn, rows.values())
        else:
            _upsert_orm(db, rows.values())
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving {len(rows)} rates, batch rolled back: {e}")
        raise PersistenceError(f"Failed to save rates: {e}") from e
    except BaseException:
        db.rollback()
        raise

    return len(rows)
