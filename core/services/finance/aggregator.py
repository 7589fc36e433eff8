from __future__ import annotations

from typing import Iterable

from core.domain import FinancialMovement, Order, SubOrder
from core.services.finance.models import OrderAggregate


def latest_by(movements: Iterable[FinancialMovement], attr: str) -> FinancialMovement | None:
    """Most recent movement by a date attribute; the earliest inserted wins ties."""
    best: FinancialMovement | None = None
    for movement in movements:
        value = getattr(movement, attr)
        if value is None:
            continue
        if best is None or value > getattr(best, attr):
            best = movement
    return best


def aggregate_order(
    order: Order,
    sub_orders: Iterable[SubOrder],
    movements: Iterable[FinancialMovement],
) -> OrderAggregate:
    rows = list(movements)
    working_total = float(sum(so.working_amount for so in sub_orders if so.order_id == order.id))
    total_invoiced = float(sum(m.invoiced for m in rows))
    total_paid = float(sum(m.paid for m in rows))

    latest_invoice = latest_by(rows, "invoice_date")
    latest_payment = latest_by(rows, "payment_date")

    return OrderAggregate(
        order_id=order.id,
        total_invoiced=total_invoiced,
        total_paid=total_paid,
        working_total=working_total,
        invoice_number=None if latest_invoice is None else latest_invoice.invoice_number,
        invoice_date=None if latest_invoice is None else latest_invoice.invoice_date,
        payment_date=None if latest_payment is None else latest_payment.payment_date,
        paid_amount=total_paid,
        receivable_balance=total_invoiced - total_paid,
        pending_to_invoice=max(0.0, working_total - total_invoiced),
    )


__all__ = ["aggregate_order", "latest_by"]
