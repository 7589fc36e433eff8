from __future__ import annotations

from typing import Iterable, Mapping

from core.domain import DeviationKind, Order, SubOrder
from core.services.finance.helpers import RECONCILIATION_TOLERANCE, as_amount, total, within_tolerance
from core.services.finance.models import BudgetDeviation, BudgetReconciliation


def reconcile_budget(
    quoted_amount: float | None,
    budgets: Mapping[str, float | None] | Iterable[float | None],
) -> BudgetReconciliation:
    """Check that per-task budgets add up to the quoted amount (0.01 tolerance)."""
    values = budgets.values() if isinstance(budgets, Mapping) else budgets
    quoted = as_amount(quoted_amount)
    assigned = total(values)
    return BudgetReconciliation(
        is_reconciled=within_tolerance(quoted, assigned, RECONCILIATION_TOLERANCE),
        difference=quoted - assigned,
        total_assigned=assigned,
        quoted_amount=quoted,
    )


def effective_budget(sub_order: SubOrder, order: Order, sibling_count: int) -> float:
    """
    Budget a task is measured against.

    Legacy orders created with a single task and no explicit task budget are
    measured against the order's quoted amount. No equivalent rule exists for
    orders with several tasks.
    """
    budget = as_amount(sub_order.budgeted_amount)
    if budget > 0.0:
        return budget
    if sibling_count == 1:
        return as_amount(order.quoted_amount)
    return budget


def budget_deviation(
    sub_order: SubOrder,
    order: Order,
    sibling_count: int,
    *,
    working_amount: float | None = None,
) -> BudgetDeviation:
    budget = effective_budget(sub_order, order, sibling_count)
    working = as_amount(sub_order.amount if working_amount is None else working_amount)
    difference = working - budget
    if within_tolerance(working, budget):
        kind = DeviationKind.MATCH
    elif difference > 0:
        kind = DeviationKind.EXCESS
    else:
        kind = DeviationKind.SHORTFALL
    return BudgetDeviation(
        effective_budget=budget,
        working_amount=working,
        difference=difference,
        kind=kind,
    )


def initial_budget_proposal(sub_orders: Iterable[SubOrder]) -> dict[str, float]:
    # The unit's declared cost is the most recent figure, so it pre-fills the form.
    return {
        so.id: as_amount(so.amount if so.amount is not None else so.budgeted_amount)
        for so in sub_orders
    }


__all__ = [
    "reconcile_budget",
    "effective_budget",
    "budget_deviation",
    "initial_budget_proposal",
]
