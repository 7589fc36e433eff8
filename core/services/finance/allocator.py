from __future__ import annotations

from types import MappingProxyType
from typing import Iterable

from core.domain import FinancialMovement, SubOrder
from core.services.finance.helpers import FLOAT_EPSILON
from core.services.finance.models import OrderAllocation


def allocate_order(
    sub_orders: Iterable[SubOrder],
    movements: Iterable[FinancialMovement],
    *,
    order_id: str,
) -> OrderAllocation:
    """
    Attribute an order's movements to its sub-tasks.

    Direct (per-task) movements count in full for their sub-task. Each global
    movement is then spread in insertion order:

    - its invoice amount pro-rata to the sub-tasks' working amounts;
    - its paid amount pro-rata to the sub-tasks' outstanding balances at that
      point (working amount minus paid so far), each share capped at the
      balance.

    Whatever a global movement cannot place (no working amount to prorate
    against, or every sub-task already fully paid) is reported on the
    allocation as unattributed and never carried into later movements.
    """
    tasks = [so for so in sub_orders if so.order_id == order_id]
    working = {so.id: so.working_amount for so in tasks}
    working_total = float(sum(working.values()))

    invoiced = {so.id: 0.0 for so in tasks}
    paid = {so.id: 0.0 for so in tasks}
    global_movements: list[FinancialMovement] = []

    for movement in movements:
        if movement.sub_order_id:
            if movement.sub_order_id in invoiced:
                invoiced[movement.sub_order_id] += movement.invoiced
                paid[movement.sub_order_id] += movement.paid
        elif movement.order_id == order_id:
            global_movements.append(movement)

    unattributed_invoiced = 0.0
    unattributed_paid = 0.0
    for movement in global_movements:
        unattributed_invoiced += _spread_invoice(movement.invoiced, working, working_total, invoiced)
        unattributed_paid += _spread_payment(movement.paid, working, paid)

    return OrderAllocation(
        order_id=order_id,
        invoiced=MappingProxyType(invoiced),
        paid=MappingProxyType(paid),
        unattributed_invoiced=unattributed_invoiced,
        unattributed_paid=unattributed_paid,
    )


def _spread_invoice(
    amount: float,
    working: dict[str, float],
    working_total: float,
    invoiced: dict[str, float],
) -> float:
    if amount == 0.0:
        return 0.0
    if working_total <= 0.0:
        return amount
    for sub_order_id, share_base in working.items():
        invoiced[sub_order_id] += amount * (share_base / working_total)
    return 0.0


def _spread_payment(
    amount: float,
    working: dict[str, float],
    paid: dict[str, float],
) -> float:
    if amount == 0.0:
        return 0.0
    balances = {
        sub_order_id: working[sub_order_id] - paid[sub_order_id]
        for sub_order_id in working
        if working[sub_order_id] - paid[sub_order_id] > 0.0
    }
    total_outstanding = float(sum(balances.values()))
    if total_outstanding <= 0.0:
        return amount

    distributed = 0.0
    for sub_order_id, balance in balances.items():
        share = min(amount * (balance / total_outstanding), balance)
        paid[sub_order_id] += share
        distributed += share
    residual = amount - distributed
    return residual if residual > FLOAT_EPSILON else 0.0


__all__ = ["allocate_order"]
