# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""create_currency_rates

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2025-12-09 13:26:19.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "currency_rates",
        sa.Column("id", sa.String(length=16), nullable=False),
        sa.Column("num_code", sa.Integer(), nullable=False),
        sa.Column("char_code", sa.String(length=3), nullable=True),
        sa.Column("nominal", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("value", sa.Numeric(precision=18, scale=4), nullable=False),
        sa.Column("vunit_rate", sa.Numeric(precision=18, scale=8), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_currency_rates_char_code"),
        "currency_rates",
        ["char_code"],
        unique=False,
    )
    op.create_index(
        op.f("ix_currency_rates_date"),
        "currency_rates",
        ["date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_currency_rates_date"), table_name="currency_rates")
    op.drop_index(op.f("ix_currency_rates_char_code"), table_name="currency_rates")
    op.drop_table("currency_rates")
