from __future__ import annotations

import logging
from dataclasses import replace
from contextlib import nullcontext
from typing import ContextManager, Iterable, Mapping

from core.domain import BillingMode, FinancialMovement
from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, ValidationError
from core.services.finance import build_finance_batch, reconcile_budget
from core.services.finance.models import BudgetReconciliation, MutationBatch

logger = logging.getLogger(__name__)


class FinanceWorkflowMixin:
    def save_order_finances(
        self,
        order_id: str,
        *,
        billing_mode: BillingMode | str | None,
        financial_observations: str | None,
        final_movements: Iterable[FinancialMovement],
        trace_id: str | None = None,
    ) -> MutationBatch:
        """
        Persist a financial edit of one order as a single all-or-nothing batch.

        The batch is planned against a fresh snapshot: billing mode resolved,
        movements diffed, statuses re-derived. Nothing is written if any step
        of the application fails.
        """
        with self._trace_scope(trace_id) as bound_trace:
            self._require_order(order_id)
            snapshot = self._store.load_snapshot()
            batch = build_finance_batch(
                snapshot,
                order_id,
                billing_mode=billing_mode,
                financial_observations=financial_observations,
                final_movements=final_movements,
            )

            try:
                self._store.apply_batch(batch)
                self._session.commit()
            except Exception as e:
                self._session.rollback()
                logger.error("Finance batch for order %s rolled back: %s", order_id, e)
                raise e

            diff = batch.movement_diff
            logger.info(
                "Applied finance batch for order %s: %d created, %d updated, %d deleted, %d status change(s)",
                order_id,
                len(diff.create),
                len(diff.update),
                len(diff.delete),
                len(batch.status_patches),
            )
            self._journal(
                event_type="ledger.finances.saved",
                message=f"Finance batch applied for order {order_id}",
                trace_id=bound_trace,
                data={
                    "order_id": order_id,
                    "billing_mode": batch.order_patch.billing_mode.value,
                    "created": len(diff.create),
                    "updated": len(diff.update),
                    "deleted": len(diff.delete),
                    "ignored": [m.id for m in diff.ignored],
                    "status_changes": {
                        patch.sub_order_id: patch.status.value for patch in batch.status_patches
                    },
                },
            )

        domain_events.order_changed.emit(order_id)
        if not diff.is_empty:
            domain_events.movements_changed.emit(order_id)
        if batch.status_patches:
            domain_events.sub_orders_changed.emit(order_id)
        return batch

    def adjust_budgets(
        self,
        order_id: str,
        *,
        quoted_amount: float,
        budgets: Mapping[str, float],
        expected_version: int | None = None,
    ) -> BudgetReconciliation:
        """
        Apply a commercial budget adjustment once it reconciles.

        An unreconciled proposal is returned as-is and nothing is written.
        A reconciled one sets the order's quoted amount and both the budget
        and the working amount of every sub-task. The budgets must list every
        sub-task of the order.
        """
        order = self._require_order(order_id)
        if expected_version is not None and order.version != expected_version:
            raise ConcurrencyError(
                "Order changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        quoted = self._validate_amount(quoted_amount, label="Quoted amount") or 0.0

        tasks = {so.id: so for so in self._sub_order_repo.list_by_order(order_id)}
        new_budgets: dict[str, float] = {}
        for sub_order_id, value in budgets.items():
            if sub_order_id not in tasks:
                raise ValidationError(
                    f"Sub-task {sub_order_id} does not belong to order {order.order_number}.",
                    code="SUB_ORDER_NOT_IN_ORDER",
                )
            new_budgets[sub_order_id] = self._validate_amount(value, label="Budget") or 0.0
        missing = [so.sub_order_number for so_id, so in tasks.items() if so_id not in new_budgets]
        if missing:
            raise ValidationError(
                f"Budget adjustment must cover every sub-task; missing {', '.join(missing)}.",
                code="BUDGETS_INCOMPLETE",
            )

        reconciliation = reconcile_budget(quoted, new_budgets)
        if not reconciliation.is_reconciled:
            logger.info(
                "Budget adjustment for order %s not reconciled (difference %.2f); nothing written",
                order.order_number,
                reconciliation.difference,
            )
            return reconciliation

        try:
            self._order_repo.update(replace(order, quoted_amount=quoted))
            for sub_order_id, value in new_budgets.items():
                self._sub_order_repo.update(
                    replace(tasks[sub_order_id], budgeted_amount=value, amount=value)
                )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info(
            "Budgets adjusted for order %s across %d sub-task(s)",
            order.order_number,
            len(new_budgets),
        )
        domain_events.budgets_changed.emit(order_id)
        domain_events.sub_orders_changed.emit(order_id)
        return reconciliation

    def _trace_scope(self, trace_id: str | None) -> ContextManager[str | None]:
        support = getattr(self, "_support", None)
        if support is None:
            return nullcontext(trace_id)
        return support.trace_scope(trace_id)

    def _journal(self, **event) -> None:
        support = getattr(self, "_support", None)
        if support is None:
            return
        support.emit_event(**event)


__all__ = ["FinanceWorkflowMixin"]
