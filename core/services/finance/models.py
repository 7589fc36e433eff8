from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from core.domain import (
    BillingMode,
    DeviationKind,
    FinancialMovement,
    MovementDraft,
    SubOrderStatus,
)


@dataclass(frozen=True)
class LedgerWarning:
    code: str
    message: str
    record_id: str | None = None


@dataclass(frozen=True)
class OrderAllocation:
    order_id: str
    invoiced: Mapping[str, float]
    paid: Mapping[str, float]
    # Global amounts that could not be spread over the order's sub-tasks.
    unattributed_invoiced: float = 0.0
    unattributed_paid: float = 0.0


@dataclass(frozen=True)
class OrderAggregate:
    order_id: str
    total_invoiced: float
    total_paid: float
    working_total: float
    invoice_number: str | None
    invoice_date: date | None
    payment_date: date | None
    paid_amount: float
    receivable_balance: float
    pending_to_invoice: float


@dataclass(frozen=True)
class SubOrderFinancials:
    sub_order_id: str
    order_id: str
    working_amount: float
    invoiced: float
    paid: float
    outstanding: float
    status: SubOrderStatus


@dataclass(frozen=True)
class LedgerView:
    order_aggregates: Mapping[str, OrderAggregate]
    sub_order_financials: Mapping[str, SubOrderFinancials]
    allocations: Mapping[str, OrderAllocation]
    order_statuses: Mapping[str, SubOrderStatus]
    warnings: tuple[LedgerWarning, ...] = ()

    def status_of(self, sub_order_id: str) -> SubOrderStatus | None:
        row = self.sub_order_financials.get(sub_order_id)
        return None if row is None else row.status


@dataclass(frozen=True)
class MovementDiff:
    create: tuple[MovementDraft, ...] = ()
    update: tuple[FinancialMovement, ...] = ()
    delete: tuple[FinancialMovement, ...] = ()
    unchanged: tuple[str, ...] = ()
    ignored: tuple[FinancialMovement, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.create or self.update or self.delete)


@dataclass(frozen=True)
class BudgetReconciliation:
    is_reconciled: bool
    difference: float
    total_assigned: float
    quoted_amount: float


@dataclass(frozen=True)
class BudgetDeviation:
    effective_budget: float
    working_amount: float
    difference: float
    kind: DeviationKind


@dataclass(frozen=True)
class OrderPatch:
    billing_mode: BillingMode
    financial_observations: str = ""
    expected_version: int | None = None


@dataclass(frozen=True)
class StatusPatch:
    sub_order_id: str
    status: SubOrderStatus
    previous: SubOrderStatus
    expected_version: int | None = None


@dataclass(frozen=True)
class MutationBatch:
    order_id: str
    order_patch: OrderPatch
    status_patches: tuple[StatusPatch, ...] = ()
    movement_diff: MovementDiff = field(default_factory=MovementDiff)


@dataclass(frozen=True)
class UnitRevenueRow:
    unit: str
    amount: float


@dataclass(frozen=True)
class PortfolioSummary:
    total_orders: int
    total_invoiced: float
    total_paid: float
    receivable_balance: float
    pending_to_invoice: float
    pending_count: int
    invoiced_count: int
    collected_count: int
    revenue_by_unit: list[UnitRevenueRow]


__all__ = [
    "LedgerWarning",
    "OrderAllocation",
    "OrderAggregate",
    "SubOrderFinancials",
    "LedgerView",
    "MovementDiff",
    "BudgetReconciliation",
    "BudgetDeviation",
    "OrderPatch",
    "StatusPatch",
    "MutationBatch",
    "UnitRevenueRow",
    "PortfolioSummary",
]
