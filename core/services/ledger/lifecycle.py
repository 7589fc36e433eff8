from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from core.domain import (
    Order,
    PaymentMethod,
    SubOrder,
    format_order_number,
    format_sub_order_number,
)
from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, ValidationError
from core.services.finance import budget_deviation
from core.services.finance.models import BudgetDeviation

logger = logging.getLogger(__name__)


class OrderLifecycleMixin:
    def create_order(
        self,
        client: str,
        *,
        quoted_amount: float | None = None,
        director: str | None = None,
        executive: str | None = None,
        description: str = "",
        work_type: str = "",
        payment_method: PaymentMethod | str | None = None,
        creation_date: date | None = None,
    ) -> Order:
        client = self._validate_required_text(client, label="Client", code="CLIENT_EMPTY")
        quoted_amount = self._validate_amount(quoted_amount, label="Quoted amount")
        if payment_method is not None and not isinstance(payment_method, PaymentMethod):
            try:
                payment_method = PaymentMethod(str(payment_method))
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown payment method: {payment_method!r}.",
                    code="PAYMENT_METHOD_INVALID",
                ) from exc

        order = Order.create(
            order_number=format_order_number(self._order_repo.count() + 1),
            client=client,
            quoted_amount=quoted_amount,
            director=(director or "").strip() or None,
            executive=(executive or "").strip() or None,
            description=(description or "").strip(),
            work_type=(work_type or "").strip(),
            payment_method=payment_method,
            creation_date=creation_date or date.today(),
        )

        try:
            self._order_repo.add(order)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Created order %s for %s", order.order_number, order.client)
        domain_events.order_changed.emit(order.id)
        return order

    def add_sub_order(
        self,
        order_id: str,
        unit: str,
        *,
        amount: float | None = None,
        budgeted_amount: float | None = None,
        work_type: str = "",
        description: str = "",
        observations: str | None = None,
        creation_date: date | None = None,
    ) -> SubOrder:
        order = self._require_order(order_id)
        unit = self._validate_required_text(unit, label="Unit", code="UNIT_EMPTY")
        amount = self._validate_amount(amount, label="Working amount")
        budgeted_amount = self._validate_amount(budgeted_amount, label="Budgeted amount")

        siblings = self._sub_order_repo.list_by_order(order_id)
        sub_order = SubOrder.create(
            order_id=order_id,
            sub_order_number=format_sub_order_number(order.order_number, len(siblings) + 1),
            unit=unit,
            amount=amount,
            budgeted_amount=budgeted_amount,
            work_type=(work_type or "").strip(),
            description=(description or "").strip(),
            observations=observations,
            creation_date=creation_date or date.today(),
        )

        try:
            self._sub_order_repo.add(sub_order)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Added sub-task %s (%s)", sub_order.sub_order_number, sub_order.unit)
        domain_events.sub_orders_changed.emit(order_id)
        return sub_order

    def update_sub_order_amount(
        self,
        sub_order_id: str,
        amount: float,
        *,
        expected_version: int | None = None,
    ) -> BudgetDeviation:
        """
        Record the unit's declared working amount for a sub-task.

        Returns how that amount deviates from the task's effective budget so
        the caller can surface an excess or shortfall.
        """
        sub_order = self._require_sub_order(sub_order_id)
        if expected_version is not None and sub_order.version != expected_version:
            raise ConcurrencyError(
                "Sub-task changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        if amount is None:
            raise ValidationError("Working amount is required.", code="AMOUNT_REQUIRED")
        amount = self._validate_amount(amount, label="Working amount")
        order = self._require_order(sub_order.order_id)

        try:
            updated = self._sub_order_repo.update(replace(sub_order, amount=amount))
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        siblings = self._sub_order_repo.list_by_order(order.id)
        deviation = budget_deviation(updated, order, len(siblings))
        logger.info(
            "Sub-task %s working amount set to %.2f (%s %.2f)",
            updated.sub_order_number,
            amount,
            deviation.kind.value,
            deviation.difference,
        )
        domain_events.sub_orders_changed.emit(order.id)
        return deviation


__all__ = ["OrderLifecycleMixin"]
