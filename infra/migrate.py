from pathlib import Path
import logging
import sys
from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)


def _app_dir() -> Path:
    """
    Returns the directory where the running app lives.
    - For PyInstaller onefile builds, prefer sys._MEIPASS (temporary extraction dir).
    - For PyInstaller onedir builds, use the folder containing the executable.
    - In dev: return the project root (infra -> project root).
    """
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass).resolve()
        return Path(sys.executable).resolve().parent
    # dev fallback: infra/migrate.py -> infra -> project root
    return Path(__file__).resolve().parents[1]


def _script_location() -> Path:
    app_dir = _app_dir()
    candidates = [
        app_dir / "migration",
        # Some packagers place resources under an '_internal' folder
        app_dir / "_internal" / "migration",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    raise RuntimeError(
        "Alembic script_location missing. Tried the following locations: "
        + ", ".join(str(p) for p in candidates)
    )


def run_migrations(db_url: str) -> None:
    script_location = _script_location()
    alembic_ini = script_location / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic config missing: {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", db_url)

    logger.info("Upgrading ledger schema at %s", db_url)
    command.upgrade(cfg, "head")
