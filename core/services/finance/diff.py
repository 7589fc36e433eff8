from __future__ import annotations

import logging
from typing import Iterable

from core.domain import FinancialMovement, MovementDraft, is_local_id
from core.services.finance.models import MovementDiff

logger = logging.getLogger(__name__)


def plan_movement_diff(
    original: Iterable[FinancialMovement],
    final: Iterable[FinancialMovement],
) -> MovementDiff:
    """
    Partition an edit of one scope's movements into create/update/delete.

    Locally-new entries (``local-`` ids) become drafts with the transient id
    dropped. A persisted entry lands in ``update`` when one of its comparable
    fields changed, in ``unchanged`` otherwise, and in ``delete`` when the
    final set no longer holds it. Final entries whose id is neither local nor
    known to the original set are returned in ``ignored`` and never written.
    """
    originals = {m.id: m for m in original}
    create: list[MovementDraft] = []
    update: list[FinancialMovement] = []
    unchanged: list[str] = []
    ignored: list[FinancialMovement] = []
    kept: set[str] = set()

    for movement in final:
        if is_local_id(movement.id):
            create.append(movement.to_draft())
            continue
        before = originals.get(movement.id)
        if before is None or movement.id in kept:
            ignored.append(movement)
            continue
        kept.add(movement.id)
        if before.comparable_fields() != movement.comparable_fields():
            update.append(movement)
        else:
            unchanged.append(movement.id)

    delete = [m for m in originals.values() if m.id not in kept]

    if ignored:
        logger.warning(
            "Ignoring %d movement(s) with unknown ids: %s",
            len(ignored),
            ", ".join(m.id for m in ignored),
        )

    return MovementDiff(
        create=tuple(create),
        update=tuple(update),
        delete=tuple(delete),
        unchanged=tuple(unchanged),
        ignored=tuple(ignored),
    )


__all__ = ["plan_movement_diff"]
