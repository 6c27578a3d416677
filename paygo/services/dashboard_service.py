from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel

from paygo.models import to_money
from paygo.models.approval import ApprovalStatus
from paygo.models.payment import PaymentStatus
from paygo.repositories.base import BillRepository, PaymentRepository, WeeklyRecordRepository
from paygo.services.payment_service import settlement_for

logger = logging.getLogger(__name__)


class DashboardSummary(BaseModel):
    total_bills: int = 0
    bills_by_status: dict[str, int] = {}
    total_nmrs: int = 0
    nmrs_by_status: dict[str, int] = {}
    total_payments: int = 0
    approved_value: Decimal = Decimal("0.00")
    total_paid: Decimal = Decimal("0.00")
    outstanding: Decimal = Decimal("0.00")
    bills_by_settlement: dict[str, int] = {}


class DashboardService:
    def __init__(
        self,
        bill_repo: BillRepository,
        record_repo: WeeklyRecordRepository,
        payment_repo: PaymentRepository,
    ) -> None:
        self.bill_repo = bill_repo
        self.record_repo = record_repo
        self.payment_repo = payment_repo

    def summary(self) -> DashboardSummary:
        bills = self.bill_repo.list_all()
        records = self.record_repo.list_all()
        payments = self.payment_repo.list_all()

        paid_by_bill: dict[str, Decimal] = {}
        for payment in payments:
            paid_by_bill[payment.bill_number] = paid_by_bill.get(payment.bill_number, Decimal("0")) + payment.paid_amount

        bills_by_status = {status.value: 0 for status in ApprovalStatus}
        bills_by_settlement = {status.value: 0 for status in PaymentStatus}
        approved_value = Decimal("0")
        for bill in bills:
            bills_by_status[bill.status.value] += 1
            if bill.status == ApprovalStatus.APPROVED:
                approved_value += bill.final_amount
                paid = paid_by_bill.get(bill.bill_number, Decimal("0"))
                bills_by_settlement[settlement_for(bill.final_amount, paid).value] += 1

        nmrs_by_status = {status.value: 0 for status in ApprovalStatus}
        for record in records:
            nmrs_by_status[record.status.value] += 1

        total_paid = sum(paid_by_bill.values(), Decimal("0"))
        result = DashboardSummary(
            total_bills=len(bills),
            bills_by_status=bills_by_status,
            total_nmrs=len(records),
            nmrs_by_status=nmrs_by_status,
            total_payments=len(payments),
            approved_value=to_money(approved_value),
            total_paid=to_money(total_paid),
            outstanding=to_money(approved_value - total_paid),
            bills_by_settlement=bills_by_settlement,
        )
        logger.debug("Dashboard summary: bills=%d nmrs=%d payments=%d", len(bills), len(records), len(payments))
        return result
