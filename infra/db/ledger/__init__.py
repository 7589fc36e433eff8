from infra.db.ledger.repository import (
    SqlAlchemyMovementRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemySubOrderRepository,
)
from infra.db.ledger.store import SqlAlchemyLedgerStore

__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemySubOrderRepository",
    "SqlAlchemyMovementRepository",
    "SqlAlchemyLedgerStore",
]
