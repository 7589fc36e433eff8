from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.interfaces import SupportJournal
from core.services.ledger import LedgerService
from infra.db.ledger import (
    SqlAlchemyLedgerStore,
    SqlAlchemyMovementRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemySubOrderRepository,
)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    ledger_store: SqlAlchemyLedgerStore
    ledger_service: LedgerService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "ledger_store": self.ledger_store,
            "ledger_service": self.ledger_service,
        }


def build_service_graph(session: Session, *, support: SupportJournal | None = None) -> ServiceGraph:
    order_repo = SqlAlchemyOrderRepository(session)
    sub_order_repo = SqlAlchemySubOrderRepository(session)
    movement_repo = SqlAlchemyMovementRepository(session)
    ledger_store = SqlAlchemyLedgerStore(
        session,
        order_repo=order_repo,
        sub_order_repo=sub_order_repo,
        movement_repo=movement_repo,
    )
    ledger_service = LedgerService(
        session,
        ledger_store,
        order_repo,
        sub_order_repo,
        movement_repo,
        support=support,
    )
    return ServiceGraph(
        session=session,
        ledger_store=ledger_store,
        ledger_service=ledger_service,
    )


def build_service_dict(session: Session, *, support: SupportJournal | None = None) -> dict[str, Any]:
    return build_service_graph(session, support=support).as_dict()
