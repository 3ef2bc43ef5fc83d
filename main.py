# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from ricemill.routers import (
    inventory_router,
    consignment_router,
    trade_router,
    freight_router,
    reconciliation_router,
    payroll_router,
    electricity_router,
    production_router,
    by_product_router,
    backup_router,
    reference_router,
)

from ricemill.core.config import APP_ENV, APP_NAME, APP_VERSION, CORS_ORIGINS
from ricemill.core.db import init_models
from ricemill.core.exceptions import AppException
from ricemill.core.logging import setup_logging
from ricemill.middleware.request_logging import request_logging_middleware
from ricemill.core.error_handlers import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    store_error_handler,
    unhandled_exception_handler,
)

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application", extra={"env": APP_ENV})

    if APP_ENV == "development":
        init_models()
        logger.info("Collection table initialized (development)")
    else:
        logger.info("init_models() skipped outside development")

    yield

    logger.info("Shutting down application")

# ------------------------------------------------------------------------------
# APP INIT
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description="Inventory, FCI consignment and ledger API for a rice mill",
    version=APP_VERSION,
    docs_url="/docs" if APP_ENV != "production" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ------------------------------------------------------------------------------
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------------------
# HEALTH CHECK
# ------------------------------------------------------------------------------
@app.get("/", tags=["Health"])
async def health_check():
    return {
        "status": "ok",
        "service": "ricemill-ledger-api",
        "environment": APP_ENV,
        "version": APP_VERSION,
    }

# ------------------------------------------------------------------------------
# ROUTERS
# ------------------------------------------------------------------------------
app.include_router(inventory_router)
app.include_router(consignment_router)
app.include_router(trade_router)
app.include_router(freight_router)
app.include_router(reconciliation_router)
app.include_router(payroll_router)
app.include_router(electricity_router)
app.include_router(production_router)
app.include_router(by_product_router)
app.include_router(backup_router)
app.include_router(reference_router)
