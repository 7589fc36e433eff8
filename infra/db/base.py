# infra/db/base.py
from __future__ import annotations
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from infra.path import default_db_url

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    """Engine for the configured ledger database, created on first use."""
    global _engine
    if _engine is None:
        db_url = default_db_url()
        logger.info("Using ledger database at: %s", db_url)
        _engine = create_engine(db_url, echo=False, future=True)
    return _engine


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _session_factory()
