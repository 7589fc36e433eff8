# infra/db/models.py
from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy import (
    String,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base


class OrderORM(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    # Insertion sequence; snapshots are read in this order.
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    order_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    client: Mapped[str] = mapped_column(String, nullable=False)
    quoted_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    billing_mode: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)  # perTask, global
    director: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    executive: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(String, default="")
    work_type: Mapped[str] = mapped_column(String, default="")
    payment_method: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    financial_observations: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    creation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_orders_position", OrderORM.position)
Index("idx_orders_director", OrderORM.director)


class SubOrderORM(Base):
    __tablename__ = "sub_orders"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    order_id: Mapped[str] = mapped_column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    sub_order_number: Mapped[str] = mapped_column(String(40), nullable=False)
    unit: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # working amount
    budgeted_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")
    work_type: Mapped[str] = mapped_column(String, default="")
    description: Mapped[str] = mapped_column(String, default="")
    observations: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    creation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_sub_orders_order", SubOrderORM.order_id)
Index("idx_sub_orders_unit", SubOrderORM.unit)
Index("idx_sub_orders_position", SubOrderORM.position)


class FinancialMovementORM(Base):
    __tablename__ = "financial_movements"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    # Exactly one of sub_order_id / order_id is set.
    sub_order_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("sub_orders.id", ondelete="CASCADE"), nullable=True
    )
    order_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=True
    )
    invoice_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    invoice_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    invoice_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    paid_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    creation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index("idx_movements_sub_order", FinancialMovementORM.sub_order_id)
Index("idx_movements_order", FinancialMovementORM.order_id)
Index("idx_movements_position", FinancialMovementORM.position)
