from __future__ import annotations

import logging
from types import MappingProxyType

from core.domain import FinancialMovement, LedgerSnapshot, Order, SubOrder, SubOrderStatus
from core.services.finance.aggregator import aggregate_order
from core.services.finance.allocator import allocate_order
from core.services.finance.models import (
    LedgerView,
    LedgerWarning,
    OrderAggregate,
    OrderAllocation,
    SubOrderFinancials,
)
from core.services.finance.status import derive_order_status, derive_sub_order_status

logger = logging.getLogger(__name__)


def compute_ledger_view(snapshot: LedgerSnapshot) -> LedgerView:
    """
    Attribution, aggregates and derived statuses for a whole snapshot.

    Records that cannot be tied to an order are skipped and reported as
    warnings; the rest of the ledger is still computed.
    """
    warnings: list[LedgerWarning] = []
    tasks_by_order, movements_by_order = _group_snapshot(snapshot, warnings)

    aggregates: dict[str, OrderAggregate] = {}
    allocations: dict[str, OrderAllocation] = {}
    financials: dict[str, SubOrderFinancials] = {}
    order_statuses: dict[str, SubOrderStatus] = {}

    for order in snapshot.orders:
        tasks = tasks_by_order[order.id]
        movements = movements_by_order[order.id]
        allocation = allocate_order(tasks, movements, order_id=order.id)
        aggregate = aggregate_order(order, tasks, movements)
        _check_residuals(order, aggregate, allocation, warnings)

        for so in tasks:
            invoiced = allocation.invoiced[so.id]
            paid = allocation.paid[so.id]
            status = derive_sub_order_status(
                working_amount=so.working_amount,
                invoiced=invoiced,
                paid=paid,
                order_working_total=aggregate.working_total,
                order_invoiced=aggregate.total_invoiced,
                order_paid=aggregate.total_paid,
                billing_mode=order.billing_mode,
            )
            financials[so.id] = SubOrderFinancials(
                sub_order_id=so.id,
                order_id=order.id,
                working_amount=so.working_amount,
                invoiced=invoiced,
                paid=paid,
                outstanding=max(0.0, so.working_amount - paid),
                status=status,
            )

        aggregates[order.id] = aggregate
        allocations[order.id] = allocation
        order_statuses[order.id] = derive_order_status(financials[so.id].status for so in tasks)

    for warning in warnings:
        logger.warning("[%s] %s", warning.code, warning.message)

    return LedgerView(
        order_aggregates=MappingProxyType(aggregates),
        sub_order_financials=MappingProxyType(financials),
        allocations=MappingProxyType(allocations),
        order_statuses=MappingProxyType(order_statuses),
        warnings=tuple(warnings),
    )


def _group_snapshot(
    snapshot: LedgerSnapshot,
    warnings: list[LedgerWarning],
) -> tuple[dict[str, list[SubOrder]], dict[str, list[FinancialMovement]]]:
    tasks_by_order: dict[str, list[SubOrder]] = {order.id: [] for order in snapshot.orders}
    movements_by_order: dict[str, list[FinancialMovement]] = {order.id: [] for order in snapshot.orders}
    owner_of_task: dict[str, str] = {}

    for so in snapshot.sub_orders:
        if so.order_id not in tasks_by_order:
            warnings.append(
                LedgerWarning(
                    code="ORPHAN_SUB_ORDER",
                    message=f"Sub-task {so.id} references missing order {so.order_id}; ignored.",
                    record_id=so.id,
                )
            )
            continue
        tasks_by_order[so.order_id].append(so)
        owner_of_task[so.id] = so.order_id

    for movement in snapshot.movements:
        owner: str | None
        if movement.sub_order_id:
            owner = owner_of_task.get(movement.sub_order_id)
            if movement.order_id:
                warnings.append(
                    LedgerWarning(
                        code="AMBIGUOUS_MOVEMENT_SCOPE",
                        message=(
                            f"Movement {movement.id} references both a sub-task and an order; "
                            "the sub-task reference is used."
                        ),
                        record_id=movement.id,
                    )
                )
        elif movement.order_id in movements_by_order:
            owner = movement.order_id
        else:
            owner = None

        if owner is None:
            warnings.append(
                LedgerWarning(
                    code="ORPHAN_MOVEMENT",
                    message=f"Movement {movement.id} references no known sub-task or order; ignored.",
                    record_id=movement.id,
                )
            )
            continue
        movements_by_order[owner].append(movement)

    return tasks_by_order, movements_by_order


def _check_residuals(
    order: Order,
    aggregate: OrderAggregate,
    allocation: OrderAllocation,
    warnings: list[LedgerWarning],
) -> None:
    if not (allocation.unattributed_invoiced or allocation.unattributed_paid):
        return
    if aggregate.working_total <= 0.0:
        warnings.append(
            LedgerWarning(
                code="ZERO_WORKING_AMOUNT",
                message=(
                    f"Order {order.order_number} has global movements but no working amount "
                    "to prorate them against."
                ),
                record_id=order.id,
            )
        )
        return
    if allocation.unattributed_paid:
        warnings.append(
            LedgerWarning(
                code="UNATTRIBUTED_PAYMENT",
                message=(
                    f"Order {order.order_number}: {allocation.unattributed_paid:.2f} of global payments "
                    "exceed the outstanding task balances and were not attributed."
                ),
                record_id=order.id,
            )
        )


__all__ = ["compute_ledger_view"]
