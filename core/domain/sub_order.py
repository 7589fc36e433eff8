from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import SubOrderStatus
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class SubOrder:
    id: str
    order_id: str
    sub_order_number: str
    unit: str
    # Working amount: the unit's declared cost for this task.
    amount: Optional[float] = None
    # Allocation ceiling set by the commercial director.
    budgeted_amount: Optional[float] = None
    status: SubOrderStatus = SubOrderStatus.PENDING
    work_type: str = ""
    description: str = ""
    observations: Optional[str] = None
    creation_date: Optional[date] = None
    version: int = 1

    @property
    def working_amount(self) -> float:
        return float(self.amount or 0.0)

    @staticmethod
    def create(order_id: str, sub_order_number: str, unit: str, **extra) -> "SubOrder":
        return SubOrder(
            id=generate_id(),
            order_id=order_id,
            sub_order_number=sub_order_number,
            unit=unit,
            **extra,
        )


__all__ = ["SubOrder"]
