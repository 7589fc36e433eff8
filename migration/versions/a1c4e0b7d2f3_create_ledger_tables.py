"""create orders, sub_orders and financial_movements

Revision ID: a1c4e0b7d2f3
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c4e0b7d2f3"
down_revision = None
branch_labels = None
depends_on = None


def _version_column() -> sa.Column:
    return sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1"))


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("order_number", sa.String(length=32), nullable=False, unique=True),
        sa.Column("client", sa.String(), nullable=False),
        sa.Column("quoted_amount", sa.Float(), nullable=True),
        sa.Column("billing_mode", sa.String(length=16), nullable=True),
        sa.Column("director", sa.String(), nullable=True),
        sa.Column("executive", sa.String(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("work_type", sa.String(), nullable=True),
        sa.Column("payment_method", sa.String(length=16), nullable=True),
        sa.Column("financial_observations", sa.String(), nullable=True),
        sa.Column("creation_date", sa.Date(), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_orders_position", "orders", ["position"])
    op.create_index("idx_orders_director", "orders", ["director"])

    op.create_table(
        "sub_orders",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.String(), nullable=False),
        sa.Column("sub_order_number", sa.String(length=40), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=True),
        sa.Column("budgeted_amount", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("work_type", sa.String(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("observations", sa.String(), nullable=True),
        sa.Column("creation_date", sa.Date(), nullable=True),
        _version_column(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_sub_orders_order", "sub_orders", ["order_id"])
    op.create_index("idx_sub_orders_unit", "sub_orders", ["unit"])
    op.create_index("idx_sub_orders_position", "sub_orders", ["position"])

    op.create_table(
        "financial_movements",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("sub_order_id", sa.String(), nullable=True),
        sa.Column("order_id", sa.String(), nullable=True),
        sa.Column("invoice_number", sa.String(), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("invoice_amount", sa.Float(), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("paid_amount", sa.Float(), nullable=True),
        sa.Column("creation_date", sa.Date(), nullable=True),
        _version_column(),
        sa.ForeignKeyConstraint(["sub_order_id"], ["sub_orders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_movements_sub_order", "financial_movements", ["sub_order_id"])
    op.create_index("idx_movements_order", "financial_movements", ["order_id"])
    op.create_index("idx_movements_position", "financial_movements", ["position"])


def downgrade() -> None:
    op.drop_index("idx_movements_position", table_name="financial_movements")
    op.drop_index("idx_movements_order", table_name="financial_movements")
    op.drop_index("idx_movements_sub_order", table_name="financial_movements")
    op.drop_table("financial_movements")

    op.drop_index("idx_sub_orders_position", table_name="sub_orders")
    op.drop_index("idx_sub_orders_unit", table_name="sub_orders")
    op.drop_index("idx_sub_orders_order", table_name="sub_orders")
    op.drop_table("sub_orders")

    op.drop_index("idx_orders_director", table_name="orders")
    op.drop_index("idx_orders_position", table_name="orders")
    op.drop_table("orders")
