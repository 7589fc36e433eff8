from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.identifiers import generate_id, generate_local_id
from core.exceptions import ValidationError


@dataclass(frozen=True)
class MovementDraft:
    """A movement that has not been persisted yet (no id)."""

    sub_order_id: Optional[str] = None
    order_id: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_amount: Optional[float] = None
    payment_date: Optional[date] = None
    paid_amount: Optional[float] = None
    creation_date: Optional[date] = None


@dataclass(frozen=True)
class FinancialMovement:
    id: str
    sub_order_id: Optional[str] = None
    order_id: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_amount: Optional[float] = None
    payment_date: Optional[date] = None
    paid_amount: Optional[float] = None
    creation_date: Optional[date] = None
    version: int = 1

    @property
    def is_per_task(self) -> bool:
        return bool(self.sub_order_id)

    @property
    def is_global(self) -> bool:
        return bool(self.order_id) and not self.sub_order_id

    @property
    def invoiced(self) -> float:
        return float(self.invoice_amount or 0.0)

    @property
    def paid(self) -> float:
        return float(self.paid_amount or 0.0)

    def comparable_fields(self) -> tuple:
        return (
            self.invoice_number,
            self.invoice_date,
            self.invoice_amount,
            self.payment_date,
            self.paid_amount,
        )

    def to_draft(self) -> MovementDraft:
        return MovementDraft(
            sub_order_id=self.sub_order_id,
            order_id=self.order_id,
            invoice_number=self.invoice_number,
            invoice_date=self.invoice_date,
            invoice_amount=self.invoice_amount,
            payment_date=self.payment_date,
            paid_amount=self.paid_amount,
            creation_date=self.creation_date,
        )

    @staticmethod
    def create(
        *,
        sub_order_id: Optional[str] = None,
        order_id: Optional[str] = None,
        local: bool = False,
        **extra,
    ) -> "FinancialMovement":
        validate_movement_scope(sub_order_id=sub_order_id, order_id=order_id)
        validate_movement_amounts(
            invoice_amount=extra.get("invoice_amount"),
            paid_amount=extra.get("paid_amount"),
        )
        return FinancialMovement(
            id=generate_local_id() if local else generate_id(),
            sub_order_id=sub_order_id,
            order_id=order_id,
            **extra,
        )


def validate_movement_scope(*, sub_order_id: Optional[str], order_id: Optional[str]) -> None:
    if sub_order_id and order_id:
        raise ValidationError(
            "A movement references either a sub-task or an order, not both.",
            code="MOVEMENT_SCOPE_AMBIGUOUS",
        )
    if not sub_order_id and not order_id:
        raise ValidationError(
            "A movement must reference a sub-task or an order.",
            code="MOVEMENT_SCOPE_MISSING",
        )


def validate_movement_amounts(*, invoice_amount: Optional[float], paid_amount: Optional[float]) -> None:
    for label, value in (("Invoice amount", invoice_amount), ("Paid amount", paid_amount)):
        if value is None:
            continue
        try:
            amount = float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{label} must be a number.", code="INVALID_AMOUNT") from exc
        if not math.isfinite(amount):
            raise ValidationError(f"{label} must be a finite number.", code="INVALID_AMOUNT")
        if amount < 0:
            raise ValidationError(f"{label} cannot be negative.", code="NEGATIVE_AMOUNT")


__all__ = ["FinancialMovement", "MovementDraft", "validate_movement_scope", "validate_movement_amounts"]
