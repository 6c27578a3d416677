from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from paygo.db import initialize_db
from paygo.exceptions import (
    DeletionBlocked,
    DuplicateIdentifier,
    EmptyEntrySet,
    Forbidden,
    InvalidAmount,
    NotApproved,
    NotFound,
    OverpaymentRejected,
    PayGoError,
    StageOutOfOrder,
    Unauthorized,
    UnitBusy,
)
from paygo.logging import configure_logging
from web.deps import DBConnectionMiddleware
from web.routes.bills import router as bills_router
from web.routes.contractors import router as contractors_router
from web.routes.dashboard import router as dashboard_router
from web.routes.nmrs import router as nmrs_router
from web.routes.payments import router as payments_router
from web.routes.projects import router as projects_router
from web.routes.users import router as users_router

configure_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PayGoError], int] = {
    InvalidAmount: 422,
    EmptyEntrySet: 422,
    Unauthorized: 401,
    Forbidden: 403,
    NotFound: 404,
    StageOutOfOrder: 409,
    NotApproved: 409,
    OverpaymentRejected: 409,
    DeletionBlocked: 409,
    DuplicateIdentifier: 409,
    UnitBusy: 503,
}


def status_for(exc: PayGoError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    logger.info("Application started")
    yield


app = FastAPI(title="PayGo", lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(bills_router)
app.include_router(nmrs_router)
app.include_router(payments_router)
app.include_router(projects_router)
app.include_router(contractors_router)
app.include_router(users_router)
app.include_router(dashboard_router)


@app.exception_handler(PayGoError)
async def paygo_error_handler(request: Request, exc: PayGoError):
    status_code = status_for(exc)
    logger.info("%s %s -> %d %s: %s", request.method, request.url.path, status_code, type(exc).__name__, exc)
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status_code)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.info("%s %s -> 400: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "ValueError", "detail": str(exc)}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"error": "InternalServerError"}, status_code=500)


@app.get("/")
def home():
    return {"service": "paygo"}
