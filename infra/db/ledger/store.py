from __future__ import annotations

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from core.domain import LedgerSnapshot
from core.exceptions import ConcurrencyError, NotFoundError
from core.interfaces import LedgerStore, MovementRepository, OrderRepository, SubOrderRepository
from core.services.finance.models import MutationBatch
from infra.db.ledger.repository import (
    SqlAlchemyMovementRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemySubOrderRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyLedgerStore(LedgerStore):
    """
    Snapshot reads and batch writes over one SQLAlchemy session.

    ``apply_batch`` only stages the writes; the caller owns the transaction
    and commits or rolls back the whole batch.
    """

    def __init__(
        self,
        session: Session,
        order_repo: OrderRepository | None = None,
        sub_order_repo: SubOrderRepository | None = None,
        movement_repo: MovementRepository | None = None,
    ):
        self.session = session
        self._order_repo = order_repo or SqlAlchemyOrderRepository(session)
        self._sub_order_repo = sub_order_repo or SqlAlchemySubOrderRepository(session)
        self._movement_repo = movement_repo or SqlAlchemyMovementRepository(session)

    def load_snapshot(self) -> LedgerSnapshot:
        # All three reads share the session's current transaction.
        return LedgerSnapshot.of(
            orders=self._order_repo.list_all(),
            sub_orders=self._sub_order_repo.list_all(),
            movements=self._movement_repo.list_all(),
        )

    def apply_batch(self, batch: MutationBatch) -> None:
        order = self._order_repo.get(batch.order_id)
        if order is None:
            raise NotFoundError("Order not found.", code="ORDER_NOT_FOUND")

        patch = batch.order_patch
        self._order_repo.update(
            replace(
                order,
                billing_mode=patch.billing_mode,
                financial_observations=patch.financial_observations,
                version=patch.expected_version if patch.expected_version is not None else order.version,
            )
        )

        for status_patch in batch.status_patches:
            sub_order = self._sub_order_repo.get(status_patch.sub_order_id)
            if sub_order is None:
                raise ConcurrencyError(
                    "Sub-task was removed by another user.",
                    code="STALE_WRITE",
                )
            expected = status_patch.expected_version
            self._sub_order_repo.update(
                replace(
                    sub_order,
                    status=status_patch.status,
                    version=expected if expected is not None else sub_order.version,
                )
            )

        diff = batch.movement_diff
        for movement in diff.delete:
            self._movement_repo.delete(movement.id, expected_version=movement.version)
        for movement in diff.update:
            self._movement_repo.update(movement)
        for draft in diff.create:
            self._movement_repo.add(draft)

        logger.debug(
            "Staged batch for order %s (%d status patch(es), %d movement write(s))",
            batch.order_id,
            len(batch.status_patches),
            len(diff.create) + len(diff.update) + len(diff.delete),
        )


__all__ = ["SqlAlchemyLedgerStore"]
