from __future__ import annotations

from core.domain import BillingMode, FinancialMovement, Order, PaymentMethod, SubOrder, SubOrderStatus
from infra.db.models import FinancialMovementORM, OrderORM, SubOrderORM


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def order_to_orm(order: Order, *, position: int) -> OrderORM:
    return OrderORM(
        id=order.id,
        position=position,
        order_number=order.order_number,
        client=order.client,
        quoted_amount=order.quoted_amount,
        billing_mode=_enum_value(order.billing_mode),
        director=order.director,
        executive=order.executive,
        description=order.description,
        work_type=order.work_type,
        payment_method=_enum_value(order.payment_method),
        financial_observations=order.financial_observations,
        creation_date=order.creation_date,
        version=getattr(order, "version", 1),
    )


def order_from_orm(obj: OrderORM) -> Order:
    return Order(
        id=obj.id,
        order_number=obj.order_number,
        client=obj.client,
        quoted_amount=obj.quoted_amount,
        billing_mode=BillingMode(obj.billing_mode) if obj.billing_mode else None,
        director=obj.director,
        executive=obj.executive,
        description=obj.description or "",
        work_type=obj.work_type or "",
        payment_method=PaymentMethod(obj.payment_method) if obj.payment_method else None,
        financial_observations=obj.financial_observations,
        creation_date=obj.creation_date,
        version=getattr(obj, "version", 1),
    )


def sub_order_to_orm(sub_order: SubOrder, *, position: int) -> SubOrderORM:
    return SubOrderORM(
        id=sub_order.id,
        position=position,
        order_id=sub_order.order_id,
        sub_order_number=sub_order.sub_order_number,
        unit=sub_order.unit,
        amount=sub_order.amount,
        budgeted_amount=sub_order.budgeted_amount,
        status=_enum_value(sub_order.status),
        work_type=sub_order.work_type,
        description=sub_order.description,
        observations=sub_order.observations,
        creation_date=sub_order.creation_date,
        version=getattr(sub_order, "version", 1),
    )


def sub_order_from_orm(obj: SubOrderORM) -> SubOrder:
    return SubOrder(
        id=obj.id,
        order_id=obj.order_id,
        sub_order_number=obj.sub_order_number,
        unit=obj.unit,
        amount=obj.amount,
        budgeted_amount=obj.budgeted_amount,
        status=SubOrderStatus(obj.status) if obj.status else SubOrderStatus.PENDING,
        work_type=obj.work_type or "",
        description=obj.description or "",
        observations=obj.observations,
        creation_date=obj.creation_date,
        version=getattr(obj, "version", 1),
    )


def movement_to_orm(movement: FinancialMovement, *, position: int) -> FinancialMovementORM:
    return FinancialMovementORM(
        id=movement.id,
        position=position,
        sub_order_id=movement.sub_order_id,
        order_id=movement.order_id,
        invoice_number=movement.invoice_number,
        invoice_date=movement.invoice_date,
        invoice_amount=movement.invoice_amount,
        payment_date=movement.payment_date,
        paid_amount=movement.paid_amount,
        creation_date=movement.creation_date,
        version=getattr(movement, "version", 1),
    )


def movement_from_orm(obj: FinancialMovementORM) -> FinancialMovement:
    return FinancialMovement(
        id=obj.id,
        sub_order_id=obj.sub_order_id,
        order_id=obj.order_id,
        invoice_number=obj.invoice_number,
        invoice_date=obj.invoice_date,
        invoice_amount=obj.invoice_amount,
        payment_date=obj.payment_date,
        paid_amount=obj.paid_amount,
        creation_date=obj.creation_date,
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "order_to_orm",
    "order_from_orm",
    "sub_order_to_orm",
    "sub_order_from_orm",
    "movement_to_orm",
    "movement_from_orm",
]
