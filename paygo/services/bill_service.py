from __future__ import annotations

import logging

from paygo.exceptions import DeletionBlocked, NotFound
from paygo.models.approval import ApprovalStatus
from paygo.models.bill import Bill
from paygo.models.roles import Actor
from paygo.repositories.base import BillRepository, PaymentRepository
from paygo.services.amounts import compute_bill_total, require_amount
from paygo.services.approval import ApprovalService
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard
from paygo.services.identifiers import BILL_NUMBERS, IdentifierAllocator, create_with_identifier
from paygo.services.locks import UnitLockRegistry, unit_locks
from paygo.services.master_data import MasterDataService
from paygo.settings import BillDeletePolicy, settings

logger = logging.getLogger(__name__)


class BillService:
    def __init__(
        self,
        bill_repo: BillRepository,
        payment_repo: PaymentRepository | None = None,
        master_data: MasterDataService | None = None,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
        locks: UnitLockRegistry | None = None,
        allocator: IdentifierAllocator | None = None,
        delete_policy: BillDeletePolicy | None = None,
    ) -> None:
        self.bill_repo = bill_repo
        self.payment_repo = payment_repo
        self.master_data = master_data or MasterDataService()
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)
        self.locks = locks or unit_locks
        self.allocator = allocator or BILL_NUMBERS
        self._delete_policy = delete_policy
        self.approvals: ApprovalService[Bill] = ApprovalService(bill_repo, "bill", locks=self.locks, authz=self.authz)

    @property
    def delete_policy(self) -> BillDeletePolicy:
        return self._delete_policy or settings.bill_delete_policy

    def create_bill(
        self,
        contractor: str,
        project: str,
        project_date: str,
        trade: str,
        unit: str,
        unit_price: object,
        quantity: object,
        description: str = "",
        location: str = "",
        *,
        actor: Actor,
    ) -> Bill:
        self.authz.require(self.authz.can_raise(actor), actor, "raise bills")
        price = require_amount("unit_price", unit_price)
        qty = require_amount("quantity", quantity)
        base_amount = compute_bill_total(price, qty)
        self.master_data.check_references(project, contractor, unit)

        def _create(bill_number: str) -> Bill:
            bill = Bill(
                display_number=bill_number,
                project=project,
                contractor=contractor,
                project_date=project_date,
                trade=trade,
                unit=unit,
                unit_price=price,
                quantity=qty,
                description=description,
                location=location,
                authorized_engineer=actor.principal,
                base_amount=base_amount,
                final_amount=base_amount,
                created_by=actor.principal,
            )
            return self.bill_repo.create(bill)

        bill = create_with_identifier(self.allocator, _create)
        logger.info(
            "Bill created: number=%s project=%s contractor=%s base=%s by=%s",
            bill.bill_number,
            project,
            contractor,
            base_amount,
            actor.principal,
        )
        return bill

    def list_bills(self, status: ApprovalStatus | None = None) -> list[Bill]:
        bills = self.bill_repo.list_all()
        if status is not None:
            bills = [b for b in bills if b.status == status]
        logger.debug("Listed %d bills (status=%s)", len(bills), status.value if status else "any")
        return bills

    def get_bill(self, uuid: str) -> Bill | None:
        result = self.bill_repo.get_by_uuid(uuid)
        logger.debug("get_bill uuid=%s found=%s", uuid, result is not None)
        return result

    def get_bill_by_number(self, bill_number: str) -> Bill | None:
        result = self.bill_repo.get_by_number(bill_number)
        logger.debug("get_bill_by_number number=%s found=%s", bill_number, result is not None)
        return result

    def approve_pm(self, uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor) -> Bill:
        return self.approvals.approve_pm(uuid, approved, debit, note, actor=actor)

    def approve_qc(self, uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor) -> Bill:
        return self.approvals.approve_qc(uuid, approved, debit, note, actor=actor)

    def approve_billing(
        self,
        uuid: str,
        approved: bool,
        final_amount_override: object | None = None,
        note: str = "",
        *,
        actor: Actor,
    ) -> Bill:
        return self.approvals.approve_billing(uuid, approved, final_amount_override, note, actor=actor)

    def delete_bill(self, uuid: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete bills")
        key = self.approvals.lock_key(uuid)
        with self.locks.hold(key):
            bill = self.bill_repo.get_by_uuid(uuid)
            if bill is None or bill.id is None:
                logger.warning("Delete failed: bill %s not found", uuid)
                raise NotFound(f"bill {uuid} not found")
            payments = self.payment_repo.list_by_bill_number(bill.bill_number) if self.payment_repo else []
            if not payments:
                self.bill_repo.delete(bill.id)
                logger.info("Bill %s deleted by %s", bill.bill_number, actor.principal)
            elif self.delete_policy == BillDeletePolicy.RESTRICT:
                logger.warning(
                    "Delete refused: bill %s has %d payment(s) and policy is restrict",
                    bill.bill_number,
                    len(payments),
                )
                raise DeletionBlocked(f"{bill.bill_number} has {len(payments)} payment(s); delete them first")
            else:
                removed = self.bill_repo.delete_with_payments(bill.id, bill.bill_number)
                logger.info(
                    "Bill %s deleted with %d payment(s) by %s",
                    bill.bill_number,
                    removed,
                    actor.principal,
                )
