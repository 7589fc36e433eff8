from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError


def update_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    values: dict[str, Any],
    *,
    not_found_message: str,
    stale_message: str,
) -> int:
    next_version = int(expected_version) + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.version == expected_version)
        .values(**values, version=next_version)
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return next_version

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message, code="NOT_FOUND")
    raise ConcurrencyError(stale_message, code="STALE_WRITE")


def delete_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    *,
    stale_message: str,
) -> None:
    # A row already gone counts as stale: someone else removed it first.
    stmt = delete(orm_type).where(orm_type.id == row_id, orm_type.version == expected_version)
    result = session.execute(stmt)
    if result.rowcount != 1:
        raise ConcurrencyError(stale_message, code="STALE_WRITE")


def next_position(session: Session, orm_type: type[Any]) -> int:
    current = session.execute(select(func.max(orm_type.position))).scalar()
    return int(current or 0) + 1


__all__ = ["update_with_version_check", "delete_with_version_check", "next_position"]
