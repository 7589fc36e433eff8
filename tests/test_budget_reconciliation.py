from __future__ import annotations

import pytest

from core.domain import DeviationKind, Order, SubOrder
from core.services.finance import (
    budget_deviation,
    effective_budget,
    initial_budget_proposal,
    reconcile_budget,
)


def test_budgets_matching_the_quote_reconcile():
    result = reconcile_budget(1000.0, [600.0, 400.0])

    assert result.is_reconciled
    assert result.difference == pytest.approx(0.0)
    assert result.total_assigned == pytest.approx(1000.0)
    assert result.quoted_amount == pytest.approx(1000.0)


def test_reconciliation_tolerance_is_one_cent():
    assert reconcile_budget(1000.0, [600.0, 399.995]).is_reconciled
    assert reconcile_budget(100.0, [99.99]).is_reconciled

    mismatch = reconcile_budget(1000.0, [600.0, 399.98])
    assert not mismatch.is_reconciled
    assert mismatch.difference == pytest.approx(0.02)


def test_difference_is_signed_quote_minus_assigned():
    assert reconcile_budget(1000.0, [700.0, 400.0]).difference == pytest.approx(-100.0)
    assert reconcile_budget(1000.0, [500.0]).difference == pytest.approx(500.0)


def test_reconcile_accepts_a_mapping_and_treats_missing_amounts_as_zero():
    result = reconcile_budget(None, {"a": None, "b": 0.0})

    assert result.is_reconciled
    assert result.total_assigned == 0.0


def _order(quoted: float | None) -> Order:
    return Order.create(order_number="OT-0001", client="Acme", quoted_amount=quoted)


def _task(order: Order, **extra) -> SubOrder:
    return SubOrder.create(order_id=order.id, sub_order_number="OT-0001-1", unit="Design", **extra)


def test_effective_budget_prefers_the_explicit_budget():
    order = _order(5000.0)
    task = _task(order, budgeted_amount=1200.0)

    assert effective_budget(task, order, sibling_count=1) == 1200.0


def test_single_legacy_task_falls_back_to_the_quoted_amount():
    order = _order(5000.0)
    task = _task(order)

    assert effective_budget(task, order, sibling_count=1) == 5000.0
    assert effective_budget(task, order, sibling_count=2) == 0.0


def test_budget_deviation_classifies_the_working_amount():
    order = _order(1000.0)
    task = _task(order, budgeted_amount=1000.0, amount=1000.004)

    assert budget_deviation(task, order, 1).kind == DeviationKind.MATCH

    excess = budget_deviation(task, order, 1, working_amount=1100.0)
    assert excess.kind == DeviationKind.EXCESS
    assert excess.difference == pytest.approx(100.0)

    shortfall = budget_deviation(task, order, 1, working_amount=900.0)
    assert shortfall.kind == DeviationKind.SHORTFALL
    assert shortfall.difference == pytest.approx(-100.0)
    assert shortfall.effective_budget == 1000.0


def test_initial_proposal_uses_working_amount_then_budget_then_zero():
    order = _order(None)
    declared = _task(order, amount=450.0, budgeted_amount=500.0)
    budget_only = _task(order, budgeted_amount=300.0)
    empty = _task(order)

    proposal = initial_budget_proposal([declared, budget_only, empty])

    assert proposal == {declared.id: 450.0, budget_only.id: 300.0, empty.id: 0.0}
