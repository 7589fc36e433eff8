from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "order-ledger-lite"
UNKNOWN_VERSION = "0+unknown"


def get_app_version() -> str:
    """Installed distribution version, overridable with OLL_APP_VERSION."""
    env_override = (os.getenv("OLL_APP_VERSION") or "").strip()
    if env_override:
        return env_override
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__all__ = ["get_app_version"]
