# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ContextManager, List, Mapping, Optional

from core.domain import FinancialMovement, LedgerSnapshot, MovementDraft, Order, SubOrder

if TYPE_CHECKING:
    from core.services.finance.models import MutationBatch


class OrderRepository(ABC):
    @abstractmethod
    def add(self, order: Order) -> None: ...

    @abstractmethod
    def update(self, order: Order) -> Order: ...

    @abstractmethod
    def get(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def list_all(self) -> List[Order]: ...

    @abstractmethod
    def count(self) -> int: ...


class SubOrderRepository(ABC):
    @abstractmethod
    def add(self, sub_order: SubOrder) -> None: ...

    @abstractmethod
    def update(self, sub_order: SubOrder) -> SubOrder: ...

    @abstractmethod
    def get(self, sub_order_id: str) -> Optional[SubOrder]: ...

    @abstractmethod
    def list_by_order(self, order_id: str) -> List[SubOrder]: ...

    @abstractmethod
    def list_all(self) -> List[SubOrder]: ...


class MovementRepository(ABC):
    @abstractmethod
    def add(self, draft: MovementDraft) -> FinancialMovement: ...

    @abstractmethod
    def update(self, movement: FinancialMovement) -> FinancialMovement: ...

    @abstractmethod
    def delete(self, movement_id: str, *, expected_version: int | None = None) -> None: ...

    @abstractmethod
    def get(self, movement_id: str) -> Optional[FinancialMovement]: ...

    @abstractmethod
    def list_all(self) -> List[FinancialMovement]: ...


class LedgerStore(ABC):
    """Reads consistent snapshots and applies mutation batches atomically."""

    @abstractmethod
    def load_snapshot(self) -> LedgerSnapshot: ...

    @abstractmethod
    def apply_batch(self, batch: MutationBatch) -> None: ...


class SupportJournal(ABC):
    """Correlates the log lines of one write and journals its outcome."""

    @abstractmethod
    def trace_scope(self, trace_id: str | None = None) -> ContextManager[str]: ...

    @abstractmethod
    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        trace_id: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> str: ...


__all__ = [
    "OrderRepository",
    "SubOrderRepository",
    "MovementRepository",
    "LedgerStore",
    "SupportJournal",
]
