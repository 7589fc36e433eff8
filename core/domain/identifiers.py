from __future__ import annotations

from uuid import uuid4

LOCAL_ID_PREFIX = "local-"


def generate_id() -> str:
    return str(uuid4())


def generate_local_id() -> str:
    """Transient id for a movement that exists only in an edit session."""
    return f"{LOCAL_ID_PREFIX}{uuid4().hex}"


def is_local_id(value: str | None) -> bool:
    return bool(value) and str(value).startswith(LOCAL_ID_PREFIX)


def format_order_number(sequence: int) -> str:
    return f"OT-{int(sequence):04d}"


def format_sub_order_number(order_number: str, sequence: int) -> str:
    return f"{order_number}-{int(sequence)}"


__all__ = [
    "LOCAL_ID_PREFIX",
    "generate_id",
    "generate_local_id",
    "is_local_id",
    "format_order_number",
    "format_sub_order_number",
]
