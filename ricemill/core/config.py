# ricemill/core/config.py

import os
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV", "development")
if APP_ENV not in {"development", "staging", "production"}:
    raise ValueError("APP_ENV must be development | staging | production")

IS_PRODUCTION = APP_ENV == "production"

APP_NAME = "Rice Mill Ledger & Inventory API"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
]

# =====================================================
# DATABASE (collection store)
# =====================================================
DB_TYPE = os.getenv("DB_TYPE", "sqlite")
if DB_TYPE not in {"postgres", "sqlite"}:
    raise ValueError("DB_TYPE must be postgres | sqlite")

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres")

elif DB_TYPE == "sqlite":
    if IS_PRODUCTION:
        raise ValueError("SQLite is NOT allowed in production")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ricemill.db")

DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
if DB_ECHO and IS_PRODUCTION:
    logger.warning("SQL echo is enabled in production")

# =====================================================
# INVENTORY POLICY
# =====================================================
# Legacy behaviour: gunny batches that reach zero are dropped from the ledger.
PRUNE_EXHAUSTED_GUNNY_BATCHES = (
    os.getenv("PRUNE_EXHAUSTED_GUNNY_BATCHES", "false").lower() == "true"
)
