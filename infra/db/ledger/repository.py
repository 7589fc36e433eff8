from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.domain import FinancialMovement, MovementDraft, Order, SubOrder, generate_id
from core.interfaces import MovementRepository, OrderRepository, SubOrderRepository
from infra.db.ledger.mapper import (
    movement_from_orm,
    movement_to_orm,
    order_from_orm,
    order_to_orm,
    sub_order_from_orm,
    sub_order_to_orm,
)
from infra.db.models import FinancialMovementORM, OrderORM, SubOrderORM
from infra.db.optimistic import delete_with_version_check, next_position, update_with_version_check


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, order: Order) -> None:
        self.session.add(order_to_orm(order, position=next_position(self.session, OrderORM)))
        self.session.flush()

    def update(self, order: Order) -> Order:
        version = update_with_version_check(
            self.session,
            OrderORM,
            order.id,
            getattr(order, "version", 1),
            {
                "client": order.client,
                "quoted_amount": order.quoted_amount,
                "billing_mode": order.billing_mode.value if order.billing_mode else None,
                "director": order.director,
                "executive": order.executive,
                "description": order.description,
                "work_type": order.work_type,
                "payment_method": order.payment_method.value if order.payment_method else None,
                "financial_observations": order.financial_observations,
            },
            not_found_message="Order not found.",
            stale_message="Order was updated by another user.",
        )
        return replace(order, version=version)

    def get(self, order_id: str) -> Optional[Order]:
        obj = self.session.get(OrderORM, order_id)
        return order_from_orm(obj) if obj else None

    def list_all(self) -> List[Order]:
        rows = self.session.execute(select(OrderORM).order_by(OrderORM.position)).scalars().all()
        return [order_from_orm(row) for row in rows]

    def count(self) -> int:
        return int(self.session.execute(select(func.count(OrderORM.id))).scalar() or 0)


class SqlAlchemySubOrderRepository(SubOrderRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, sub_order: SubOrder) -> None:
        self.session.add(sub_order_to_orm(sub_order, position=next_position(self.session, SubOrderORM)))
        self.session.flush()

    def update(self, sub_order: SubOrder) -> SubOrder:
        version = update_with_version_check(
            self.session,
            SubOrderORM,
            sub_order.id,
            getattr(sub_order, "version", 1),
            {
                "unit": sub_order.unit,
                "amount": sub_order.amount,
                "budgeted_amount": sub_order.budgeted_amount,
                "status": sub_order.status.value,
                "work_type": sub_order.work_type,
                "description": sub_order.description,
                "observations": sub_order.observations,
            },
            not_found_message="Sub-task not found.",
            stale_message="Sub-task was updated by another user.",
        )
        return replace(sub_order, version=version)

    def get(self, sub_order_id: str) -> Optional[SubOrder]:
        obj = self.session.get(SubOrderORM, sub_order_id)
        return sub_order_from_orm(obj) if obj else None

    def list_by_order(self, order_id: str) -> List[SubOrder]:
        stmt = (
            select(SubOrderORM)
            .where(SubOrderORM.order_id == order_id)
            .order_by(SubOrderORM.position)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [sub_order_from_orm(row) for row in rows]

    def list_all(self) -> List[SubOrder]:
        rows = self.session.execute(select(SubOrderORM).order_by(SubOrderORM.position)).scalars().all()
        return [sub_order_from_orm(row) for row in rows]


class SqlAlchemyMovementRepository(MovementRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, draft: MovementDraft) -> FinancialMovement:
        movement = FinancialMovement(
            id=generate_id(),
            sub_order_id=draft.sub_order_id,
            order_id=draft.order_id,
            invoice_number=draft.invoice_number,
            invoice_date=draft.invoice_date,
            invoice_amount=draft.invoice_amount,
            payment_date=draft.payment_date,
            paid_amount=draft.paid_amount,
            creation_date=draft.creation_date or date.today(),
        )
        position = next_position(self.session, FinancialMovementORM)
        self.session.add(movement_to_orm(movement, position=position))
        self.session.flush()
        return movement

    def update(self, movement: FinancialMovement) -> FinancialMovement:
        version = update_with_version_check(
            self.session,
            FinancialMovementORM,
            movement.id,
            getattr(movement, "version", 1),
            {
                "invoice_number": movement.invoice_number,
                "invoice_date": movement.invoice_date,
                "invoice_amount": movement.invoice_amount,
                "payment_date": movement.payment_date,
                "paid_amount": movement.paid_amount,
            },
            not_found_message="Financial movement not found.",
            stale_message="Financial movement was updated by another user.",
        )
        return replace(movement, version=version)

    def delete(self, movement_id: str, *, expected_version: int | None = None) -> None:
        if expected_version is None:
            self.session.query(FinancialMovementORM).filter_by(id=movement_id).delete()
            return
        delete_with_version_check(
            self.session,
            FinancialMovementORM,
            movement_id,
            expected_version,
            stale_message="Financial movement was changed or removed by another user.",
        )

    def get(self, movement_id: str) -> Optional[FinancialMovement]:
        obj = self.session.get(FinancialMovementORM, movement_id)
        return movement_from_orm(obj) if obj else None

    def list_all(self) -> List[FinancialMovement]:
        stmt = select(FinancialMovementORM).order_by(FinancialMovementORM.position)
        rows = self.session.execute(stmt).scalars().all()
        return [movement_from_orm(row) for row in rows]


__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemySubOrderRepository",
    "SqlAlchemyMovementRepository",
]
