# ricemill/core/db.py

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from ricemill.core.config import (
    DATABASE_URL,
    DB_TYPE,
    DB_ECHO,
    APP_ENV,
)

# =====================================================
# BASE
# =====================================================
Base = declarative_base()

# =====================================================
# CONNECTION CONFIG
# =====================================================
connect_args = {}
pool_args = {}

if DB_TYPE == "postgres":
    pool_args = {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
    }

elif DB_TYPE == "sqlite":
    connect_args = {"check_same_thread": False}

# =====================================================
# ENGINE
# =====================================================
engine = create_engine(
    DATABASE_URL,
    echo=DB_ECHO,
    future=True,
    connect_args=connect_args,
    **pool_args,
)

# =====================================================
# SESSION
# =====================================================
SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


# =====================================================
# SQLITE WAL
# =====================================================
if DB_TYPE == "sqlite":
    @event.listens_for(engine, "connect")
    def enable_sqlite_wal(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

# =====================================================
# MODEL IMPORT
# =====================================================
import ricemill.models  # noqa

# =====================================================
# DEV ONLY: AUTO CREATE TABLES
# =====================================================
def init_models():
    if APP_ENV != "development":
        raise RuntimeError("init_models() is forbidden outside development")

    Base.metadata.create_all(engine)
