from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from core.domain import BillingMode, DeviationKind, FinancialMovement, SubOrderStatus, generate_local_id
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ConcurrencyError, NotFoundError, ValidationError


def _order_with_tasks(ls, amounts=(600.0, 400.0), **order_extra):
    order = ls.create_order("Acme", quoted_amount=sum(amounts), **order_extra)
    tasks = [
        ls.add_sub_order(order.id, f"Unit {i}", amount=amount, budgeted_amount=amount)
        for i, amount in enumerate(amounts, start=1)
    ]
    return order, tasks


def _statuses(ls, order_id):
    return [so.status for so in ls.list_sub_orders(order_id)]


def test_orders_and_sub_tasks_are_numbered_sequentially(services):
    ls = services["ledger_service"]

    first = ls.create_order("Acme", quoted_amount=1000.0, director="Ana")
    second = ls.create_order("Globex")
    t1 = ls.add_sub_order(first.id, "Design", amount=600.0)
    t2 = ls.add_sub_order(first.id, "Build", amount=400.0)

    assert (first.order_number, second.order_number) == ("OT-0001", "OT-0002")
    assert (t1.sub_order_number, t2.sub_order_number) == ("OT-0001-1", "OT-0001-2")
    assert t1.status == SubOrderStatus.PENDING
    assert [o.id for o in ls.list_orders()] == [first.id, second.id]
    assert ls.get_order(first.id).director == "Ana"


def test_order_and_sub_task_input_validation(services):
    ls = services["ledger_service"]

    with pytest.raises(ValidationError) as exc:
        ls.create_order("   ")
    assert exc.value.code == "CLIENT_EMPTY"

    with pytest.raises(ValidationError) as exc:
        ls.create_order("Acme", quoted_amount=-1.0)
    assert exc.value.code == "NEGATIVE_AMOUNT"

    with pytest.raises(ValidationError):
        ls.create_order("Acme", payment_method="BARTER")

    with pytest.raises(NotFoundError):
        ls.add_sub_order("missing", "Design")

    order = ls.create_order("Acme")
    with pytest.raises(ValidationError) as exc:
        ls.add_sub_order(order.id, "")
    assert exc.value.code == "UNIT_EMPTY"


def test_worked_example_through_the_service(services):
    ls = services["ledger_service"]
    order, (a, b) = _order_with_tasks(ls)

    batch = ls.save_order_finances(
        order.id,
        billing_mode=BillingMode.GLOBAL,
        financial_observations="Single invoice for the whole order",
        final_movements=[
            FinancialMovement.create(
                order_id=order.id,
                local=True,
                invoice_number="F-100",
                invoice_date=date(2026, 6, 1),
                invoice_amount=1000.0,
                payment_date=date(2026, 6, 15),
                paid_amount=500.0,
            )
        ],
    )

    assert len(batch.movement_diff.create) == 1
    assert len(batch.status_patches) == 2
    assert _statuses(ls, order.id) == [SubOrderStatus.INVOICED, SubOrderStatus.INVOICED]

    stored = ls.get_order(order.id)
    assert stored.billing_mode == BillingMode.GLOBAL
    assert stored.financial_observations == "Single invoice for the whole order"
    assert stored.version == 2

    movements = ls.list_order_movements(order.id)
    assert len(movements) == 1
    assert not movements[0].id.startswith("local-")

    view = ls.get_ledger_view()
    assert view.sub_order_financials[a.id].paid == pytest.approx(300.0)
    assert view.sub_order_financials[b.id].paid == pytest.approx(200.0)
    assert view.order_aggregates[order.id].invoice_number == "F-100"


def test_statuses_follow_later_edits_and_deletes(services):
    ls = services["ledger_service"]
    order, _ = _order_with_tasks(ls)
    ls.save_order_finances(
        order.id,
        billing_mode="global",
        financial_observations="",
        final_movements=[
            FinancialMovement.create(order_id=order.id, local=True, invoice_amount=1000.0, paid_amount=500.0)
        ],
    )

    movement = ls.list_order_movements(order.id)[0]
    batch = ls.save_order_finances(
        order.id,
        billing_mode=None,
        financial_observations="",
        final_movements=[replace(movement, paid_amount=1000.0)],
    )
    assert [m.id for m in batch.movement_diff.update] == [movement.id]
    assert _statuses(ls, order.id) == [SubOrderStatus.COLLECTED, SubOrderStatus.COLLECTED]
    assert ls.get_ledger_view().order_statuses[order.id] == SubOrderStatus.COLLECTED

    batch = ls.save_order_finances(
        order.id,
        billing_mode=None,
        financial_observations="",
        final_movements=[],
    )
    assert len(batch.movement_diff.delete) == 1
    assert ls.list_order_movements(order.id) == []
    assert _statuses(ls, order.id) == [SubOrderStatus.PENDING, SubOrderStatus.PENDING]


def test_billing_mode_is_locked_after_the_first_save(services):
    ls = services["ledger_service"]
    order, (a, _) = _order_with_tasks(ls)

    assert ls.get_billing_state(order.id) == (None, False)

    ls.save_order_finances(
        order.id,
        billing_mode=BillingMode.PER_TASK,
        financial_observations="",
        final_movements=[FinancialMovement.create(sub_order_id=a.id, local=True, invoice_amount=600.0)],
    )
    assert ls.get_billing_state(order.id) == (BillingMode.PER_TASK, True)
    assert _statuses(ls, order.id) == [SubOrderStatus.INVOICED, SubOrderStatus.PENDING]

    with pytest.raises(BusinessRuleError):
        ls.save_order_finances(
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[],
        )
    assert len(ls.list_order_movements(order.id)) == 1


def test_failed_batch_writes_nothing(services):
    ls = services["ledger_service"]
    order, (a, _) = _order_with_tasks(ls)
    ls.save_order_finances(
        order.id,
        billing_mode=BillingMode.PER_TASK,
        financial_observations="first",
        final_movements=[FinancialMovement.create(sub_order_id=a.id, local=True, invoice_amount=100.0)],
    )
    movement = ls.list_order_movements(order.id)[0]

    stale = replace(movement, paid_amount=600.0, version=movement.version + 7)
    with pytest.raises(ConcurrencyError):
        ls.save_order_finances(
            order.id,
            billing_mode=None,
            financial_observations="second",
            final_movements=[
                stale,
                FinancialMovement.create(sub_order_id=a.id, local=True, invoice_amount=5.0),
            ],
        )

    assert ls.get_order(order.id).financial_observations == "first"
    assert [m.id for m in ls.list_order_movements(order.id)] == [movement.id]
    assert ls.list_order_movements(order.id)[0].paid_amount is None
    assert _statuses(ls, order.id) == [SubOrderStatus.INVOICED, SubOrderStatus.PENDING]


def test_budget_adjustment_requires_reconciliation(services):
    ls = services["ledger_service"]
    order, (a, b) = _order_with_tasks(ls)

    proposal = ls.propose_budget_adjustment(order.id)
    assert proposal == {a.id: 600.0, b.id: 400.0}

    rejected = ls.adjust_budgets(order.id, quoted_amount=1200.0, budgets={a.id: 700.0, b.id: 400.0})
    assert not rejected.is_reconciled
    assert rejected.difference == pytest.approx(100.0)
    assert ls.get_order(order.id).quoted_amount == pytest.approx(1000.0)

    accepted = ls.adjust_budgets(order.id, quoted_amount=1200.0, budgets={a.id: 800.0, b.id: 400.0})
    assert accepted.is_reconciled
    assert ls.get_order(order.id).quoted_amount == pytest.approx(1200.0)
    updated = {so.id: so for so in ls.list_sub_orders(order.id)}
    assert (updated[a.id].budgeted_amount, updated[a.id].amount) == (800.0, 800.0)
    assert (updated[b.id].budgeted_amount, updated[b.id].amount) == (400.0, 400.0)


def test_budget_adjustment_rejects_foreign_sub_tasks_and_stale_orders(services):
    ls = services["ledger_service"]
    order, (a, b) = _order_with_tasks(ls)
    other, (foreign,) = _order_with_tasks(ls, amounts=(50.0,))

    with pytest.raises(ValidationError) as exc:
        ls.adjust_budgets(order.id, quoted_amount=50.0, budgets={foreign.id: 50.0})
    assert exc.value.code == "SUB_ORDER_NOT_IN_ORDER"

    with pytest.raises(ConcurrencyError):
        ls.adjust_budgets(
            order.id,
            quoted_amount=1000.0,
            budgets={a.id: 600.0, b.id: 400.0},
            expected_version=9,
        )



def test_budget_adjustment_must_cover_every_sub_task(services):
    ls = services["ledger_service"]
    order, (a, b) = _order_with_tasks(ls)

    with pytest.raises(ValidationError) as exc:
        ls.adjust_budgets(order.id, quoted_amount=600.0, budgets={a.id: 600.0})
    assert exc.value.code == "BUDGETS_INCOMPLETE"

    assert ls.get_order(order.id).quoted_amount == pytest.approx(1000.0)
    stored = {so.id: so.budgeted_amount for so in ls.list_sub_orders(order.id)}
    assert stored == {a.id: 600.0, b.id: 400.0}
    assert sum(stored.values()) == pytest.approx(ls.get_order(order.id).quoted_amount)

def test_working_amount_update_reports_budget_deviation(services):
    ls = services["ledger_service"]
    order = ls.create_order("Acme", quoted_amount=900.0)
    task = ls.add_sub_order(order.id, "Design")

    deviation = ls.update_sub_order_amount(task.id, 1000.0)

    # Single legacy task without a budget is measured against the quote
    assert deviation.effective_budget == pytest.approx(900.0)
    assert deviation.kind == DeviationKind.EXCESS
    assert ls.list_sub_orders(order.id)[0].amount == pytest.approx(1000.0)

    with pytest.raises(ConcurrencyError):
        ls.update_sub_order_amount(task.id, 800.0, expected_version=task.version)
    with pytest.raises(ValidationError):
        ls.update_sub_order_amount(task.id, -5.0)


def test_portfolio_summary_through_the_service(services):
    ls = services["ledger_service"]
    order, (a, b) = _order_with_tasks(ls, director="Ana")
    ls.save_order_finances(
        order.id,
        billing_mode=BillingMode.PER_TASK,
        financial_observations="",
        final_movements=[
            FinancialMovement.create(sub_order_id=a.id, local=True, invoice_amount=600.0, paid_amount=600.0)
        ],
    )

    summary = ls.get_portfolio_summary(director="Ana")

    assert summary.total_orders == 1
    assert summary.collected_count == 1
    assert summary.pending_count == 1
    assert [(row.unit, row.amount) for row in summary.revenue_by_unit] == [("Unit 1", pytest.approx(600.0))]
    assert ls.get_portfolio_summary(director="Nobody").total_orders == 0


def test_domain_events_fire_after_successful_writes(services):
    ls = services["ledger_service"]
    seen: list[tuple[str, str]] = []
    handlers = {
        name: (lambda order_id, _name=name: seen.append((_name, order_id)))
        for name in ("order_changed", "sub_orders_changed", "movements_changed", "budgets_changed")
    }
    for name, handler in handlers.items():
        getattr(domain_events, name).connect(handler)
    try:
        order, (a, b) = _order_with_tasks(ls)
        seen.clear()
        ls.save_order_finances(
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[FinancialMovement.create(order_id=order.id, local=True, invoice_amount=10.0)],
        )
        assert seen == [
            ("order_changed", order.id),
            ("movements_changed", order.id),
            ("sub_orders_changed", order.id),
        ]

        seen.clear()
        ls.adjust_budgets(order.id, quoted_amount=1000.0, budgets={a.id: 500.0, b.id: 500.0})
        assert ("budgets_changed", order.id) in seen
    finally:
        for name, handler in handlers.items():
            getattr(domain_events, name).disconnect(handler)


def test_snapshot_lists_records_in_insertion_order(services):
    ls = services["ledger_service"]
    first, first_tasks = _order_with_tasks(ls)
    second, second_tasks = _order_with_tasks(ls, amounts=(250.0,))

    snapshot = ls.get_snapshot()

    assert [o.id for o in snapshot.orders] == [first.id, second.id]
    assert [so.id for so in snapshot.sub_orders] == [t.id for t in first_tasks + second_tasks]
    assert snapshot.movements == ()


def test_saving_a_negative_movement_is_rejected_and_nothing_is_stored(services):
    ls = services["ledger_service"]
    order, _ = _order_with_tasks(ls)
    movement = FinancialMovement(
        id=generate_local_id(),
        order_id=order.id,
        invoice_amount=-50.0,
        paid_amount=-100.0,
    )

    with pytest.raises(ValidationError) as exc:
        ls.save_order_finances(
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[movement],
        )
    assert exc.value.code == "NEGATIVE_AMOUNT"
    assert ls.list_order_movements(order.id) == []
    assert ls.get_order(order.id).billing_mode is None


def test_non_finite_amounts_are_rejected(services):
    ls = services["ledger_service"]

    with pytest.raises(ValidationError) as exc:
        ls.create_order("Acme", quoted_amount=float("nan"))
    assert exc.value.code == "INVALID_AMOUNT"

    order = ls.create_order("Acme")
    with pytest.raises(ValidationError) as exc:
        ls.add_sub_order(order.id, "Design", amount=float("inf"))
    assert exc.value.code == "INVALID_AMOUNT"
