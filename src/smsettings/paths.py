from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc, user_data_dir as _ud

STORE_ENV = "SMSETTINGS_STORE"
NONCE_SECRET_ENV = "SMSETTINGS_NONCE_SECRET"
STORE_FILENAME = "options.json"

# ---------------------------------------------------------------------------
# User directories
# ---------------------------------------------------------------------------

def _app_name(default: str) -> str:
    return os.getenv("SMSETTINGS_APP_NAME", default)

def user_config_dir(app_name: str = "smsettings") -> Path:
    app = _app_name(app_name)
    return Path(_uc(appname=app)).resolve()

def user_data_dir(app_name: str = "smsettings") -> Path:
    app = _app_name(app_name)
    return Path(_ud(appname=app)).resolve()

# ---------------------------------------------------------------------------
# Option store
# ---------------------------------------------------------------------------

def default_store_path() -> Path:
    """Return the option file used when no explicit store is given."""
    env = os.getenv(STORE_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return user_data_dir() / STORE_FILENAME

def nonce_secret() -> str | None:
    return os.getenv(NONCE_SECRET_ENV) or None
