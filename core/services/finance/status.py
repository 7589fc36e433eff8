from __future__ import annotations

from typing import Iterable

from core.domain import STATUS_RANK, BillingMode, SubOrderStatus
from core.services.finance.helpers import reaches


def derive_sub_order_status(
    *,
    working_amount: float,
    invoiced: float,
    paid: float,
    order_working_total: float,
    order_invoiced: float,
    order_paid: float,
    billing_mode: BillingMode | None,
) -> SubOrderStatus:
    """
    Derive a sub-task's lifecycle status from attributed and order-level totals.

    A fully paid order marks every task collected even when per-task
    attribution falls short. The billing mode decides which scope counts as
    evidence that invoicing started: the task itself (per-task) or the whole
    order (global). Without a billing mode only collection is recognised.
    """
    task_paid = working_amount > 0.0 and reaches(paid, working_amount)
    order_fully_paid = order_working_total > 0.0 and reaches(order_paid, order_working_total)
    if task_paid or order_fully_paid:
        return SubOrderStatus.COLLECTED

    if billing_mode == BillingMode.PER_TASK and (invoiced > 0.0 or paid > 0.0):
        return SubOrderStatus.INVOICED
    if billing_mode == BillingMode.GLOBAL and (order_invoiced > 0.0 or order_paid > 0.0):
        return SubOrderStatus.INVOICED
    return SubOrderStatus.PENDING


def derive_order_status(statuses: Iterable[SubOrderStatus]) -> SubOrderStatus:
    """An order is only as far along as its least advanced sub-task."""
    ranked = list(statuses)
    if not ranked:
        return SubOrderStatus.PENDING
    return min(ranked, key=lambda status: STATUS_RANK[status])


__all__ = ["derive_sub_order_status", "derive_order_status"]
