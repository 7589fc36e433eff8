from __future__ import annotations

from dataclasses import replace

import pytest

from core.domain import (
    BillingMode,
    FinancialMovement,
    LedgerSnapshot,
    Order,
    SubOrder,
    SubOrderStatus,
    generate_local_id,
)
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.services.finance import build_finance_batch


@pytest.fixture
def ledger():
    order = Order.create(order_number="OT-0001", client="Acme")
    a = SubOrder.create(order_id=order.id, sub_order_number="OT-0001-1", unit="Design", amount=600.0)
    b = SubOrder.create(order_id=order.id, sub_order_number="OT-0001-2", unit="Build", amount=400.0)
    return order, a, b


def test_first_save_sets_mode_plans_creates_and_patches_changed_statuses(ledger):
    order, a, b = ledger
    snapshot = LedgerSnapshot.of([order], [a, b])
    invoice = FinancialMovement.create(sub_order_id=a.id, local=True, invoice_amount=600.0)

    batch = build_finance_batch(
        snapshot,
        order.id,
        billing_mode=BillingMode.PER_TASK,
        financial_observations="Invoice sent by mail",
        final_movements=[invoice],
    )

    assert batch.order_patch.billing_mode == BillingMode.PER_TASK
    assert batch.order_patch.financial_observations == "Invoice sent by mail"
    assert batch.order_patch.expected_version == order.version
    assert len(batch.movement_diff.create) == 1
    assert [(p.sub_order_id, p.status, p.previous) for p in batch.status_patches] == [
        (a.id, SubOrderStatus.INVOICED, SubOrderStatus.PENDING)
    ]


def test_unchanged_statuses_produce_no_patch(ledger):
    order, a, b = ledger
    order = replace(order, billing_mode=BillingMode.GLOBAL)
    a = replace(a, status=SubOrderStatus.INVOICED)
    b = replace(b, status=SubOrderStatus.INVOICED)
    existing = FinancialMovement(id="m-1", order_id=order.id, invoice_amount=1000.0)
    snapshot = LedgerSnapshot.of([order], [a, b], [existing])

    batch = build_finance_batch(
        snapshot,
        order.id,
        billing_mode=None,
        financial_observations=None,
        final_movements=[existing],
    )

    assert batch.status_patches == ()
    assert batch.movement_diff.is_empty
    assert batch.order_patch.billing_mode == BillingMode.GLOBAL
    assert batch.order_patch.financial_observations == ""


def test_removing_all_movements_moves_statuses_back(ledger):
    order, a, b = ledger
    order = replace(order, billing_mode=BillingMode.GLOBAL)
    a = replace(a, status=SubOrderStatus.COLLECTED)
    b = replace(b, status=SubOrderStatus.COLLECTED)
    paid = FinancialMovement(id="m-1", order_id=order.id, invoice_amount=1000.0, paid_amount=1000.0)
    snapshot = LedgerSnapshot.of([order], [a, b], [paid])

    batch = build_finance_batch(
        snapshot,
        order.id,
        billing_mode=None,
        financial_observations="",
        final_movements=[],
    )

    assert [m.id for m in batch.movement_diff.delete] == ["m-1"]
    assert {p.status for p in batch.status_patches} == {SubOrderStatus.PENDING}


def test_ignored_movements_do_not_influence_statuses(ledger):
    order, a, b = ledger
    snapshot = LedgerSnapshot.of([order], [a, b])
    forged = FinancialMovement(id="m-forged", sub_order_id=a.id, paid_amount=600.0)

    batch = build_finance_batch(
        snapshot,
        order.id,
        billing_mode="perTask",
        financial_observations="",
        final_movements=[forged],
    )

    assert [m.id for m in batch.movement_diff.ignored] == ["m-forged"]
    assert batch.status_patches == ()


def test_locked_mode_cannot_be_switched_in_a_save(ledger):
    order, a, b = ledger
    existing = FinancialMovement(id="m-1", sub_order_id=a.id, invoice_amount=10.0)
    snapshot = LedgerSnapshot.of([order], [a, b], [existing])

    with pytest.raises(BusinessRuleError):
        build_finance_batch(
            snapshot,
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[existing],
        )


def test_movements_must_belong_to_the_edited_order(ledger):
    order, a, b = ledger
    other = Order.create(order_number="OT-0002", client="Globex")
    snapshot = LedgerSnapshot.of([order, other], [a, b])

    with pytest.raises(ValidationError) as exc:
        build_finance_batch(
            snapshot,
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[FinancialMovement.create(order_id=other.id, local=True, paid_amount=1.0)],
        )
    assert exc.value.code == "MOVEMENT_OUTSIDE_ORDER"


def test_unknown_order_is_not_found(ledger):
    with pytest.raises(NotFoundError):
        build_finance_batch(
            LedgerSnapshot.of(),
            "missing",
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[],
        )


@pytest.mark.parametrize(
    "amounts, code",
    [
        ({"paid_amount": -100.0, "invoice_amount": -50.0}, "NEGATIVE_AMOUNT"),
        ({"paid_amount": float("nan")}, "INVALID_AMOUNT"),
        ({"invoice_amount": float("inf")}, "INVALID_AMOUNT"),
    ],
)
def test_movements_built_outside_the_factory_are_amount_checked(ledger, amounts, code):
    order, a, b = ledger
    snapshot = LedgerSnapshot.of([order], [a, b])
    movement = FinancialMovement(id=generate_local_id(), order_id=order.id, **amounts)

    with pytest.raises(ValidationError) as exc:
        build_finance_batch(
            snapshot,
            order.id,
            billing_mode=BillingMode.GLOBAL,
            financial_observations="",
            final_movements=[movement],
        )
    assert exc.value.code == code


def test_movement_factory_rejects_non_finite_amounts(ledger):
    order, _, _ = ledger

    with pytest.raises(ValidationError) as exc:
        FinancialMovement.create(order_id=order.id, paid_amount=float("nan"))
    assert exc.value.code == "INVALID_AMOUNT"

    with pytest.raises(ValidationError) as exc:
        FinancialMovement.create(order_id=order.id, invoice_amount=-1.0)
    assert exc.value.code == "NEGATIVE_AMOUNT"
