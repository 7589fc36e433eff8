from __future__ import annotations

from core.domain import LedgerSnapshot, SubOrderStatus
from core.services.finance.models import LedgerView, PortfolioSummary, UnitRevenueRow


def build_portfolio_summary(
    snapshot: LedgerSnapshot,
    view: LedgerView,
    *,
    unit: str | None = None,
    director: str | None = None,
) -> PortfolioSummary:
    orders_by_id = {order.id: order for order in snapshot.orders}
    selected = [
        so
        for so in snapshot.sub_orders
        if so.id in view.sub_order_financials
        and (unit is None or so.unit == unit)
        and (director is None or orders_by_id[so.order_id].director == director)
    ]
    sub_ids = {so.id for so in selected}
    order_ids = {so.order_id for so in selected}
    relevant = [
        m
        for m in snapshot.movements
        if (m.sub_order_id and m.sub_order_id in sub_ids)
        or (not m.sub_order_id and m.order_id in order_ids)
    ]

    total_invoiced = float(sum(m.invoiced for m in relevant))
    total_paid = float(sum(m.paid for m in relevant))
    total_work = float(sum(so.working_amount for so in selected))

    counts = {status: 0 for status in SubOrderStatus}
    revenue: dict[str, float] = {}
    for so in selected:
        row = view.sub_order_financials[so.id]
        counts[row.status] += 1
        if row.paid > 0.0:
            revenue[so.unit] = revenue.get(so.unit, 0.0) + row.paid

    revenue_rows = [
        UnitRevenueRow(unit=name, amount=amount)
        for name, amount in revenue.items()
        if amount > 0.01
    ]
    revenue_rows.sort(key=lambda row: (-row.amount, row.unit.lower()))

    return PortfolioSummary(
        total_orders=len(order_ids),
        total_invoiced=total_invoiced,
        total_paid=total_paid,
        receivable_balance=total_invoiced - total_paid,
        pending_to_invoice=max(0.0, total_work - total_invoiced),
        pending_count=counts[SubOrderStatus.PENDING],
        invoiced_count=counts[SubOrderStatus.INVOICED],
        collected_count=counts[SubOrderStatus.COLLECTED],
        revenue_by_unit=revenue_rows,
    )


__all__ = ["build_portfolio_summary"]
