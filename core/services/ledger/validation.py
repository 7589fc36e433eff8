from __future__ import annotations

import math

from core.domain import Order, SubOrder
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import OrderRepository, SubOrderRepository


class LedgerValidationMixin:
    _order_repo: OrderRepository
    _sub_order_repo: SubOrderRepository

    def _require_order(self, order_id: str) -> Order:
        order = self._order_repo.get(order_id)
        if order is None:
            raise NotFoundError("Order not found.", code="ORDER_NOT_FOUND")
        return order

    def _require_sub_order(self, sub_order_id: str) -> SubOrder:
        sub_order = self._sub_order_repo.get(sub_order_id)
        if sub_order is None:
            raise NotFoundError("Sub-task not found.", code="SUB_ORDER_NOT_FOUND")
        return sub_order

    @staticmethod
    def _validate_required_text(value: str | None, *, label: str, code: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValidationError(f"{label} cannot be empty.", code=code)
        return cleaned

    @staticmethod
    def _validate_amount(value: float | None, *, label: str) -> float | None:
        if value is None:
            return None
        try:
            amount = float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{label} must be a number.", code="INVALID_AMOUNT") from exc
        if not math.isfinite(amount):
            raise ValidationError(f"{label} must be a finite number.", code="INVALID_AMOUNT")
        if amount < 0:
            raise ValidationError(f"{label} cannot be negative.", code="NEGATIVE_AMOUNT")
        return amount


__all__ = ["LedgerValidationMixin"]
