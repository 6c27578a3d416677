from __future__ import annotations

import logging

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from paygo.db import get_engine
from paygo.models.roles import Actor
from paygo.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyContractorRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyWeeklyRecordRepository,
)
from paygo.services.bill_service import BillService
from paygo.services.contractor_service import ContractorService
from paygo.services.dashboard_service import DashboardService
from paygo.services.master_data import MasterDataService
from paygo.services.nmr_service import NMRService
from paygo.services.payment_service import PaymentService
from paygo.services.project_service import ProjectService
from paygo.services.user_service import UserService

logger = logging.getLogger(__name__)

PRINCIPAL_HEADER = "X-Principal"


class DBConnectionMiddleware:
    """Pure ASGI middleware: one DB connection per request, closed on the way out."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection: created on first use, closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_principal(request: Request) -> str:
    return request.headers.get(PRINCIPAL_HEADER, "").strip()


def get_user_service(request: Request) -> UserService:
    return UserService(SQLAlchemyUserRepository(_get_conn(request)))


def get_actor(request: Request) -> Actor:
    """Resolve the caller from the X-Principal header, or raise Unauthorized/Forbidden."""
    return get_user_service(request).resolve_actor(get_principal(request))


def _get_master_data(conn) -> MasterDataService:
    return MasterDataService(SQLAlchemyProjectRepository(conn), SQLAlchemyContractorRepository(conn))


def get_bill_service(request: Request) -> BillService:
    conn = _get_conn(request)
    return BillService(
        SQLAlchemyBillRepository(conn),
        SQLAlchemyPaymentRepository(conn),
        master_data=_get_master_data(conn),
    )


def get_nmr_service(request: Request) -> NMRService:
    conn = _get_conn(request)
    return NMRService(SQLAlchemyWeeklyRecordRepository(conn), master_data=_get_master_data(conn))


def get_payment_service(request: Request) -> PaymentService:
    conn = _get_conn(request)
    return PaymentService(SQLAlchemyPaymentRepository(conn), SQLAlchemyBillRepository(conn))


def get_project_service(request: Request) -> ProjectService:
    return ProjectService(SQLAlchemyProjectRepository(_get_conn(request)))


def get_contractor_service(request: Request) -> ContractorService:
    return ContractorService(SQLAlchemyContractorRepository(_get_conn(request)))


def get_dashboard_service(request: Request) -> DashboardService:
    conn = _get_conn(request)
    return DashboardService(
        SQLAlchemyBillRepository(conn),
        SQLAlchemyWeeklyRecordRepository(conn),
        SQLAlchemyPaymentRepository(conn),
    )
