"""Notify snapshot consumers that an order's ledger data changed."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.order_changed: Signal[str] = Signal()       # order_id
        self.sub_orders_changed: Signal[str] = Signal()  # order_id
        self.movements_changed: Signal[str] = Signal()   # order_id
        self.budgets_changed: Signal[str] = Signal()     # order_id


# SINGLE global instance
domain_events = DomainEvents()
