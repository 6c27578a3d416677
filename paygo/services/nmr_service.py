from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from paygo.exceptions import NotFound
from paygo.models.approval import ApprovalStatus
from paygo.models.nmr import NMREntry, WeeklyRecord
from paygo.models.roles import Actor
from paygo.repositories.base import WeeklyRecordRepository
from paygo.services.amounts import compute_entry_amount, compute_weekly_total, require_amount
from paygo.services.approval import ApprovalService
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard
from paygo.services.identifiers import NMR_NUMBERS, IdentifierAllocator, create_with_identifier
from paygo.services.locks import UnitLockRegistry, unit_locks
from paygo.services.master_data import MasterDataService

logger = logging.getLogger(__name__)


def build_entry(raw: NMREntry | Mapping, sort_order: int = 0) -> NMREntry:
    """Validate one labour line and compute its amount (persons x rate x hours)."""
    data = raw.model_dump() if isinstance(raw, NMREntry) else dict(raw)
    persons = require_amount("persons", data.get("persons"))
    rate = require_amount("rate", data.get("rate"))
    hours = require_amount("hours", data.get("hours"))
    return NMREntry(
        date=data.get("date") or "",
        labour_type=data.get("labour_type") or "",
        persons=persons,
        rate=rate,
        hours=hours,
        duty=data.get("duty") or "",
        amount=compute_entry_amount(persons, rate, hours),
        sort_order=sort_order,
    )


class NMRService:
    def __init__(
        self,
        record_repo: WeeklyRecordRepository,
        master_data: MasterDataService | None = None,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
        locks: UnitLockRegistry | None = None,
        allocator: IdentifierAllocator | None = None,
    ) -> None:
        self.record_repo = record_repo
        self.master_data = master_data or MasterDataService()
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)
        self.locks = locks or unit_locks
        self.allocator = allocator or NMR_NUMBERS
        self.approvals: ApprovalService[WeeklyRecord] = ApprovalService(
            record_repo, "nmr", locks=self.locks, authz=self.authz
        )

    def create_weekly_record(
        self,
        project: str,
        contractor: str,
        week_start: str,
        week_end: str,
        entries: Iterable[NMREntry | Mapping],
        *,
        actor: Actor,
        trade: str = "",
        engineer_name: str = "",
    ) -> WeeklyRecord:
        self.authz.require(self.authz.can_raise(actor), actor, "raise weekly records")
        built = [build_entry(raw, i) for i, raw in enumerate(entries)]
        base_amount = compute_weekly_total(built)
        self.master_data.check_references(project, contractor)

        def _create(nmr_number: str) -> WeeklyRecord:
            record = WeeklyRecord(
                display_number=nmr_number,
                project=project,
                contractor=contractor,
                trade=trade,
                engineer_name=engineer_name or actor.principal,
                week_start=week_start,
                week_end=week_end,
                entries=built,
                base_amount=base_amount,
                final_amount=base_amount,
                created_by=actor.principal,
            )
            return self.record_repo.create(record)

        record = create_with_identifier(self.allocator, _create)
        logger.info(
            "Weekly record created: number=%s project=%s entries=%d base=%s by=%s",
            record.nmr_number,
            project,
            len(built),
            base_amount,
            actor.principal,
        )
        return record

    def list_records(self, status: ApprovalStatus | None = None) -> list[WeeklyRecord]:
        records = self.record_repo.list_all()
        if status is not None:
            records = [r for r in records if r.status == status]
        logger.debug("Listed %d weekly records (status=%s)", len(records), status.value if status else "any")
        return records

    def get_record(self, uuid: str) -> WeeklyRecord | None:
        result = self.record_repo.get_by_uuid(uuid)
        logger.debug("get_record uuid=%s found=%s", uuid, result is not None)
        return result

    def approve_pm(
        self, uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor
    ) -> WeeklyRecord:
        return self.approvals.approve_pm(uuid, approved, debit, note, actor=actor)

    def approve_qc(
        self, uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor
    ) -> WeeklyRecord:
        return self.approvals.approve_qc(uuid, approved, debit, note, actor=actor)

    def approve_billing(
        self,
        uuid: str,
        approved: bool,
        final_amount_override: object | None = None,
        note: str = "",
        *,
        actor: Actor,
    ) -> WeeklyRecord:
        return self.approvals.approve_billing(uuid, approved, final_amount_override, note, actor=actor)

    def delete_nmr(self, uuid: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete weekly records")
        key = self.approvals.lock_key(uuid)
        with self.locks.hold(key):
            record = self.record_repo.get_by_uuid(uuid)
            if record is None or record.id is None:
                logger.warning("Delete failed: weekly record %s not found", uuid)
                raise NotFound(f"nmr {uuid} not found")
            self.record_repo.delete(record.id)
        logger.info("Weekly record %s deleted by %s", record.nmr_number, actor.principal)
