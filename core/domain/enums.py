from __future__ import annotations

from enum import Enum


class BillingMode(str, Enum):
    PER_TASK = "perTask"
    GLOBAL = "global"


class SubOrderStatus(str, Enum):
    PENDING = "PENDING"
    INVOICED = "INVOICED"
    COLLECTED = "COLLECTED"


class PaymentMethod(str, Enum):
    CREDIT = "CREDIT"
    ADVANCE = "ADVANCE"
    CASH = "CASH"


class DeviationKind(str, Enum):
    MATCH = "MATCH"
    EXCESS = "EXCESS"
    SHORTFALL = "SHORTFALL"


# Lifecycle rank, used to compare statuses without relying on enum order.
STATUS_RANK: dict[SubOrderStatus, int] = {
    SubOrderStatus.PENDING: 0,
    SubOrderStatus.INVOICED: 1,
    SubOrderStatus.COLLECTED: 2,
}


__all__ = ["BillingMode", "SubOrderStatus", "PaymentMethod", "DeviationKind", "STATUS_RANK"]
