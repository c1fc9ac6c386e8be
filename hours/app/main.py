"""Hours Ledger: FastAPI entrypoint."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hours.app.api import business_info
from hours.app.api import clients
from hours.app.api import contracts
from hours.app.api import invoices
from hours.app.api import payment_details
from hours.app.api import recipients
from hours.app.api import time_entries
from hours.app.core.errors import (
    ConflictError,
    LedgerError,
    NotFoundError,
    ParseError,
    PersistenceError,
    PreconditionError,
    RenderError,
)
from hours.app.core.logging_setup import setup_logging
from hours.app.core.settings import get_settings
from hours.app.db.migrations import init_db
from hours.app.db.session import engine

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(title=settings.app_name, version=settings.api_version)

ERROR_STATUS_CODES = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (ParseError, 400),
    (PreconditionError, 400),
    (RenderError, 502),
    (PersistenceError, 500),
)

app.include_router(clients.router)
app.include_router(contracts.router)
app.include_router(recipients.router)
app.include_router(payment_details.router)
app.include_router(business_info.router)
app.include_router(time_entries.router)
app.include_router(invoices.router)


def status_code_for(exc: LedgerError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_ledger():
    setup_logging(settings.log_level)
    applied = init_db(engine)
    if applied:
        logger.info("Applied %d migrations on startup", len(applied))


@app.on_event("shutdown")
def close_ledger():
    engine.dispose()
