from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import (
    LedgerStore,
    MovementRepository,
    OrderRepository,
    SubOrderRepository,
    SupportJournal,
)
from core.services.ledger.finance import FinanceWorkflowMixin
from core.services.ledger.lifecycle import OrderLifecycleMixin
from core.services.ledger.query import LedgerQueryMixin
from core.services.ledger.validation import LedgerValidationMixin


class LedgerService(
    OrderLifecycleMixin,
    FinanceWorkflowMixin,
    LedgerQueryMixin,
    LedgerValidationMixin,
):
    """Ledger service orchestrator: wiring repositories + composing mixins."""

    def __init__(
        self,
        session: Session,
        store: LedgerStore,
        order_repo: OrderRepository,
        sub_order_repo: SubOrderRepository,
        movement_repo: MovementRepository,
        support: SupportJournal | None = None,
    ):
        self._session: Session = session
        self._store: LedgerStore = store
        self._order_repo: OrderRepository = order_repo
        self._sub_order_repo: SubOrderRepository = sub_order_repo
        self._movement_repo: MovementRepository = movement_repo
        self._support: SupportJournal | None = support


__all__ = ["LedgerService"]
