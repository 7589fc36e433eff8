from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import BillingMode, PaymentMethod
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    client: str
    quoted_amount: Optional[float] = None
    billing_mode: Optional[BillingMode] = None
    director: Optional[str] = None
    executive: Optional[str] = None
    description: str = ""
    work_type: str = ""
    payment_method: Optional[PaymentMethod] = None
    financial_observations: Optional[str] = None
    creation_date: Optional[date] = None
    version: int = 1

    @staticmethod
    def create(order_number: str, client: str, **extra) -> "Order":
        return Order(
            id=generate_id(),
            order_number=order_number,
            client=client,
            **extra,
        )


__all__ = ["Order"]
