"""Payment ledger: records cash paid against fully approved bills.

A bill's balance is never stored on the bill. It is always
``final_amount - sum(paid_amount)`` over the payments that currently exist,
so deleting a payment restores the balance without further bookkeeping.
The ``balance`` and ``status`` kept on each payment are snapshots taken when
that payment was recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from paygo.constants import IST_TZ
from paygo.exceptions import InvalidAmount, NotApproved, NotFound, OverpaymentRejected
from paygo.models import to_money
from paygo.models.approval import ApprovalStatus
from paygo.models.bill import Bill
from paygo.models.payment import Payment, PaymentStatus
from paygo.models.roles import Actor
from paygo.repositories.base import BillRepository, PaymentRepository
from paygo.services.amounts import require_amount
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard
from paygo.services.identifiers import PAYMENT_IDS, IdentifierAllocator, create_with_identifier
from paygo.services.locks import UnitLockRegistry, unit_locks

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _today() -> date:
    return datetime.now(IST_TZ).date()


def settlement_for(bill_total: Decimal, total_paid: Decimal) -> PaymentStatus:
    if total_paid <= 0:
        return PaymentStatus.PENDING
    if total_paid >= bill_total:
        return PaymentStatus.COMPLETED
    return PaymentStatus.PARTIAL


class PaymentService:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        bill_repo: BillRepository,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
        locks: UnitLockRegistry | None = None,
        allocator: IdentifierAllocator | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self.payment_repo = payment_repo
        self.bill_repo = bill_repo
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)
        self.locks = locks or unit_locks
        self.allocator = allocator or PAYMENT_IDS
        self.clock = clock or _today

    def _require_bill(self, bill_number: str) -> Bill:
        bill = self.bill_repo.get_by_number(bill_number)
        if bill is None:
            logger.warning("Payment failed: bill %s not found", bill_number)
            raise NotFound(f"bill {bill_number} not found")
        return bill

    def total_paid(self, bill_number: str) -> Decimal:
        payments = self.payment_repo.list_by_bill_number(bill_number)
        return to_money(sum((p.paid_amount for p in payments), ZERO))

    def create_payment(
        self,
        bill_number: str,
        payment_date: str,
        paid_amount: object,
        *,
        actor: Actor,
    ) -> Payment:
        self.authz.require(self.authz.can_record_payment(actor), actor, "record payments")
        amount = to_money(require_amount("paid_amount", paid_amount))
        if amount <= 0:
            logger.warning("Payment failed: non-positive amount %r for bill %s", paid_amount, bill_number)
            raise InvalidAmount(f"paid_amount must be greater than zero, got {paid_amount!r}")

        found = self._require_bill(bill_number)
        with self.locks.hold(f"bill:{found.uuid}"):
            # Re-read under the lock: the bill may have been re-decided or deleted meanwhile.
            bill = self.bill_repo.get_by_uuid(found.uuid)
            if bill is None:
                logger.warning("Payment failed: bill %s was deleted", bill_number)
                raise NotFound(f"bill {bill_number} not found")
            if bill.status != ApprovalStatus.APPROVED:
                logger.warning("Payment failed: bill %s is %s", bill_number, bill.status.value)
                raise NotApproved(f"{bill_number} is {bill.status.value}, not Approved")

            bill_total = bill.final_amount
            prior = self.total_paid(bill_number)
            if prior + amount > bill_total:
                logger.warning(
                    "Payment failed: %s + %s exceeds bill total %s for %s",
                    prior,
                    amount,
                    bill_total,
                    bill_number,
                )
                raise OverpaymentRejected(
                    f"Paying {amount} would exceed {bill_number}: total {bill_total}, already paid {prior}"
                )
            balance = to_money(bill_total - prior - amount)
            status = PaymentStatus.COMPLETED if balance == 0 else PaymentStatus.PARTIAL

            def _create(payment_id: str) -> Payment:
                payment = Payment(
                    payment_id=payment_id,
                    bill_number=bill_number,
                    payment_date=payment_date or self.clock().isoformat(),
                    paid_amount=amount,
                    project=bill.project,
                    contractor=bill.contractor,
                    bill_total=bill_total,
                    balance=balance,
                    status=status,
                    created_by=actor.principal,
                )
                return self.payment_repo.create(payment)

            payment = create_with_identifier(self.allocator, _create)
        logger.info(
            "Payment recorded: id=%s bill=%s amount=%s balance=%s status=%s by=%s",
            payment.payment_id,
            bill_number,
            amount,
            balance,
            status.value,
            actor.principal,
        )
        return payment

    def get_balance(self, bill_number: str) -> Decimal:
        bill = self._require_bill(bill_number)
        balance = to_money(bill.final_amount - self.total_paid(bill_number))
        logger.debug("get_balance bill=%s balance=%s", bill_number, balance)
        return balance

    def settlement_status(self, bill_number: str) -> PaymentStatus:
        bill = self._require_bill(bill_number)
        return settlement_for(bill.final_amount, self.total_paid(bill_number))

    def list_payments(self, bill_number: str | None = None) -> list[Payment]:
        if bill_number is None:
            result = sorted(self.payment_repo.list_all(), key=lambda p: p.payment_id, reverse=True)
        else:
            result = self.payment_repo.list_by_bill_number(bill_number)
        logger.debug("Listed %d payments (bill=%s)", len(result), bill_number or "any")
        return result

    def get_payment(self, uuid: str) -> Payment | None:
        result = self.payment_repo.get_by_uuid(uuid)
        logger.debug("get_payment uuid=%s found=%s", uuid, result is not None)
        return result

    def delete_payment(self, uuid: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete payments")
        payment = self.payment_repo.get_by_uuid(uuid)
        if payment is None or payment.id is None:
            logger.warning("Delete failed: payment %s not found", uuid)
            raise NotFound(f"payment {uuid} not found")
        bill = self.bill_repo.get_by_number(payment.bill_number)
        if bill is None:
            self.payment_repo.delete(payment.id)
        else:
            with self.locks.hold(f"bill:{bill.uuid}"):
                self.payment_repo.delete(payment.id)
        logger.info("Payment %s for bill %s deleted by %s", payment.payment_id, payment.bill_number, actor.principal)
