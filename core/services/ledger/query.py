from __future__ import annotations

from typing import List

from core.domain import BillingMode, FinancialMovement, LedgerSnapshot, Order, SubOrder
from core.services.finance import (
    build_portfolio_summary,
    compute_ledger_view,
    infer_billing_mode,
    initial_budget_proposal,
    is_billing_mode_locked,
)
from core.services.finance.models import LedgerView, PortfolioSummary


class LedgerQueryMixin:
    def get_snapshot(self) -> LedgerSnapshot:
        return self._store.load_snapshot()

    def get_ledger_view(self, snapshot: LedgerSnapshot | None = None) -> LedgerView:
        return compute_ledger_view(snapshot or self.get_snapshot())

    def get_portfolio_summary(
        self,
        *,
        unit: str | None = None,
        director: str | None = None,
    ) -> PortfolioSummary:
        snapshot = self.get_snapshot()
        return build_portfolio_summary(
            snapshot,
            compute_ledger_view(snapshot),
            unit=unit,
            director=director,
        )

    def list_orders(self) -> List[Order]:
        return self._order_repo.list_all()

    def get_order(self, order_id: str) -> Order | None:
        return self._order_repo.get(order_id)

    def list_sub_orders(self, order_id: str) -> List[SubOrder]:
        return self._sub_order_repo.list_by_order(order_id)

    def list_order_movements(self, order_id: str) -> List[FinancialMovement]:
        scoped = LedgerSnapshot.of(
            sub_orders=self._sub_order_repo.list_by_order(order_id),
            movements=self._movement_repo.list_all(),
        )
        return scoped.movements_for(order_id)

    def get_billing_state(self, order_id: str) -> tuple[BillingMode | None, bool]:
        """Inferred billing mode and whether it can still be changed."""
        order = self._require_order(order_id)
        movements = self.list_order_movements(order_id)
        return infer_billing_mode(order, movements), is_billing_mode_locked(order, movements)

    def propose_budget_adjustment(self, order_id: str) -> dict[str, float]:
        self._require_order(order_id)
        return initial_budget_proposal(self._sub_order_repo.list_by_order(order_id))


__all__ = ["LedgerQueryMixin"]
