from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from core.domain import (
    BillingMode,
    FinancialMovement,
    LedgerSnapshot,
    is_local_id,
    validate_movement_amounts,
    validate_movement_scope,
)
from core.exceptions import NotFoundError, ValidationError
from core.services.finance.billing import resolve_billing_mode_change
from core.services.finance.diff import plan_movement_diff
from core.services.finance.engine import compute_ledger_view
from core.services.finance.models import MutationBatch, OrderPatch, StatusPatch


def build_finance_batch(
    snapshot: LedgerSnapshot,
    order_id: str,
    *,
    billing_mode: BillingMode | str | None,
    financial_observations: str | None,
    final_movements: Iterable[FinancialMovement],
) -> MutationBatch:
    """
    Turn a user's financial edit of one order into a mutation batch.

    Statuses are re-derived over a provisional snapshot holding the final
    movements and mode, and only tasks whose stored status changes get a patch.
    """
    order = snapshot.get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found.", code="ORDER_NOT_FOUND")

    tasks = snapshot.sub_orders_for(order_id)
    task_ids = {so.id for so in tasks}
    original = snapshot.movements_for(order_id)
    mode = resolve_billing_mode_change(order, original, billing_mode)

    final = list(final_movements)
    for movement in final:
        validate_movement_scope(sub_order_id=movement.sub_order_id, order_id=movement.order_id)
        validate_movement_amounts(
            invoice_amount=movement.invoice_amount,
            paid_amount=movement.paid_amount,
        )
        in_scope = (
            movement.sub_order_id in task_ids
            if movement.sub_order_id
            else movement.order_id == order_id
        )
        if not in_scope:
            raise ValidationError(
                f"Movement {movement.id} does not belong to order {order.order_number}.",
                code="MOVEMENT_OUTSIDE_ORDER",
            )

    diff = plan_movement_diff(original, final)
    written = _written_movements(final, {m.id for m in diff.update} | set(diff.unchanged))

    patched_order = replace(
        order,
        billing_mode=mode,
        financial_observations=financial_observations or "",
    )
    view = compute_ledger_view(
        snapshot.with_order_movements(order_id, written, order=patched_order)
    )

    patches = []
    for so in tasks:
        status = view.status_of(so.id)
        if status is not None and status != so.status:
            patches.append(
                StatusPatch(
                    sub_order_id=so.id,
                    status=status,
                    previous=so.status,
                    expected_version=so.version,
                )
            )

    return MutationBatch(
        order_id=order_id,
        order_patch=OrderPatch(
            billing_mode=mode,
            financial_observations=financial_observations or "",
            expected_version=order.version,
        ),
        status_patches=tuple(patches),
        movement_diff=diff,
    )


def _written_movements(final: list[FinancialMovement], kept_ids: set[str]) -> list[FinancialMovement]:
    seen: set[str] = set()
    out: list[FinancialMovement] = []
    for movement in final:
        if is_local_id(movement.id):
            out.append(movement)
        elif movement.id in kept_ids and movement.id not in seen:
            seen.add(movement.id)
            out.append(movement)
    return out


__all__ = ["build_finance_batch"]
