from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from core.domain.movement import FinancialMovement
from core.domain.order import Order
from core.domain.sub_order import SubOrder


@dataclass(frozen=True)
class LedgerSnapshot:
    """One consistent read of the three ledger collections.

    Sequence order is insertion order; the aggregator relies on it to break
    ties between movements that share a date.
    """

    orders: tuple[Order, ...] = field(default_factory=tuple)
    sub_orders: tuple[SubOrder, ...] = field(default_factory=tuple)
    movements: tuple[FinancialMovement, ...] = field(default_factory=tuple)

    @staticmethod
    def of(
        orders: Iterable[Order] = (),
        sub_orders: Iterable[SubOrder] = (),
        movements: Iterable[FinancialMovement] = (),
    ) -> "LedgerSnapshot":
        return LedgerSnapshot(tuple(orders), tuple(sub_orders), tuple(movements))

    def get_order(self, order_id: str) -> Order | None:
        return next((o for o in self.orders if o.id == order_id), None)

    def sub_orders_for(self, order_id: str) -> list[SubOrder]:
        return [so for so in self.sub_orders if so.order_id == order_id]

    def movements_for(self, order_id: str) -> list[FinancialMovement]:
        """Direct movements of the order's sub-tasks plus its global movements."""
        sub_ids = {so.id for so in self.sub_orders_for(order_id)}
        return [
            m
            for m in self.movements
            if (m.sub_order_id and m.sub_order_id in sub_ids)
            or (not m.sub_order_id and m.order_id == order_id)
        ]

    def with_order_movements(
        self,
        order_id: str,
        movements: Iterable[FinancialMovement],
        *,
        order: Order | None = None,
    ) -> "LedgerSnapshot":
        """Copy with one order's movements (and optionally the order) replaced."""
        scoped = {m.id for m in self.movements_for(order_id)}
        kept = [m for m in self.movements if m.id not in scoped]
        orders = self.orders
        if order is not None:
            orders = tuple(order if o.id == order_id else o for o in self.orders)
        return replace(self, orders=orders, movements=tuple(kept) + tuple(movements))


__all__ = ["LedgerSnapshot"]
