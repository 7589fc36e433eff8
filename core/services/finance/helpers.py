from __future__ import annotations

from typing import Iterable

RECONCILIATION_TOLERANCE = 0.01
# Absorbs binary rounding noise (e.g. 100 - 99.99) without widening a tolerance.
FLOAT_EPSILON = 1e-9


def as_amount(value: float | int | None) -> float:
    return float(value or 0.0)


def total(values: Iterable[float | int | None]) -> float:
    return float(sum(as_amount(v) for v in values))


def reaches(amount: float, target: float) -> bool:
    return amount + FLOAT_EPSILON >= target


def within_tolerance(lhs: float, rhs: float, tolerance: float = RECONCILIATION_TOLERANCE) -> bool:
    return abs(lhs - rhs) <= tolerance + FLOAT_EPSILON


__all__ = [
    "RECONCILIATION_TOLERANCE",
    "FLOAT_EPSILON",
    "as_amount",
    "total",
    "reaches",
    "within_tolerance",
]
