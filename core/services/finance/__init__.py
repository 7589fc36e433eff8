from .aggregator import aggregate_order
from .allocator import allocate_order
from .batch import build_finance_batch
from .billing import infer_billing_mode, is_billing_mode_locked, resolve_billing_mode_change
from .budget import budget_deviation, effective_budget, initial_budget_proposal, reconcile_budget
from .diff import plan_movement_diff
from .engine import compute_ledger_view
from .models import (
    BudgetDeviation,
    BudgetReconciliation,
    LedgerView,
    LedgerWarning,
    MovementDiff,
    MutationBatch,
    OrderAggregate,
    OrderAllocation,
    OrderPatch,
    PortfolioSummary,
    StatusPatch,
    SubOrderFinancials,
    UnitRevenueRow,
)
from .portfolio import build_portfolio_summary
from .status import derive_order_status, derive_sub_order_status

__all__ = [
    "allocate_order",
    "aggregate_order",
    "derive_sub_order_status",
    "derive_order_status",
    "plan_movement_diff",
    "reconcile_budget",
    "effective_budget",
    "budget_deviation",
    "initial_budget_proposal",
    "infer_billing_mode",
    "is_billing_mode_locked",
    "resolve_billing_mode_change",
    "compute_ledger_view",
    "build_finance_batch",
    "build_portfolio_summary",
    "LedgerView",
    "LedgerWarning",
    "OrderAllocation",
    "OrderAggregate",
    "SubOrderFinancials",
    "MovementDiff",
    "BudgetReconciliation",
    "BudgetDeviation",
    "OrderPatch",
    "StatusPatch",
    "MutationBatch",
    "PortfolioSummary",
    "UnitRevenueRow",
]
