# main.py
import logging

from infra.db.base import SessionLocal
from infra.logging_config import record_startup_event, setup_logging
from infra.migrate import run_migrations
from infra.operational_support import get_operational_support
from infra.path import default_db_url
from infra.services import ServiceGraph, build_service_graph
from infra.version import get_app_version

logger = logging.getLogger(__name__)


def build_services() -> ServiceGraph:
    run_migrations(db_url=default_db_url())
    session = SessionLocal()
    return build_service_graph(session, support=get_operational_support())


def main() -> int:
    log_file = setup_logging()
    record_startup_event(log_file)
    logger.info("Order Ledger Lite %s starting", get_app_version())

    services = build_services()
    try:
        summary = services.ledger_service.get_portfolio_summary()
        logger.info(
            "Ledger loaded: %d order(s), invoiced %.2f, paid %.2f, receivable %.2f",
            summary.total_orders,
            summary.total_invoiced,
            summary.total_paid,
            summary.receivable_balance,
        )
    finally:
        services.session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
