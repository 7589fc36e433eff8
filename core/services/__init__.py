from .finance import compute_ledger_view, build_finance_batch, build_portfolio_summary
from .ledger import LedgerService

__all__ = [
    "LedgerService",
    "compute_ledger_view",
    "build_finance_batch",
    "build_portfolio_summary",
]
