"""Create cars and orders tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `cars` inventory table and the append-only `orders` table.
How:   Portable column types (Uuid, DateTime with time zone) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cars",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("brand", sa.String(100), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        # Sedan, SUV, Truck, Coupe, Convertible (validated by the API)
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("in_stock", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint("price >= 0", name="ck_cars_price_non_negative"),
        sa.CheckConstraint("quantity >= 0", name="ck_cars_quantity_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Search filters on brand and category
    op.create_index("idx_cars_brand", "cars", ["brand"])
    op.create_index("idx_cars_category", "cars", ["category"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("car_id", sa.Uuid(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["car_id"], ["cars.id"], ondelete="SET NULL"),
        sa.CheckConstraint("quantity >= 1", name="ck_orders_quantity_positive"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_orders_car_id", "orders", ["car_id"])


def downgrade() -> None:
    op.drop_index("idx_orders_car_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_cars_category", table_name="cars")
    op.drop_index("idx_cars_brand", table_name="cars")
    op.drop_table("cars")
