from __future__ import annotations

from typing import Iterable

from core.domain import BillingMode, FinancialMovement, Order
from core.exceptions import BusinessRuleError, ValidationError


def infer_billing_mode(order: Order, movements: Iterable[FinancialMovement]) -> BillingMode | None:
    """Stored mode wins; legacy orders fall back to the shape of their movements."""
    if order.billing_mode is not None:
        return order.billing_mode
    rows = list(movements)
    if any(m.is_per_task for m in rows):
        return BillingMode.PER_TASK
    if any(m.is_global for m in rows):
        return BillingMode.GLOBAL
    return None


def is_billing_mode_locked(order: Order, movements: Iterable[FinancialMovement]) -> bool:
    return order.billing_mode is not None or any(True for _ in movements)


def resolve_billing_mode_change(
    order: Order,
    movements: Iterable[FinancialMovement],
    requested: BillingMode | str | None,
) -> BillingMode:
    rows = list(movements)
    current = infer_billing_mode(order, rows)
    if requested is None:
        if current is None:
            raise ValidationError(
                "Select a billing mode before saving financial changes.",
                code="BILLING_MODE_REQUIRED",
            )
        return current

    if not isinstance(requested, BillingMode):
        try:
            requested = BillingMode(str(requested))
        except ValueError as exc:
            raise ValidationError(
                f"Unknown billing mode: {requested!r}.",
                code="BILLING_MODE_INVALID",
            ) from exc

    if is_billing_mode_locked(order, rows) and current is not None and requested != current:
        raise BusinessRuleError(
            f"Billing mode is already {current.value} and cannot change once money has moved.",
            code="BILLING_MODE_LOCKED",
        )
    return requested


__all__ = ["infer_billing_mode", "is_billing_mode_locked", "resolve_billing_mode_change"]
