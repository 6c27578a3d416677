"""The PM -> QC -> Billing sign-off pipeline shared by bills and weekly records.

``apply_*`` functions are the pure state machine: they take a unit and return
an updated copy, leaving the input untouched when they raise.
``ApprovalService`` adds role checks, per-unit locking and persistence.
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from paygo.exceptions import InvalidAmount, NotFound, StageOutOfOrder
from paygo.models import to_money
from paygo.models.approval import ApprovalStage, ApprovalStatus, PayableUnit, StageDecision
from paygo.models.roles import Actor
from paygo.repositories.base import PayableUnitRepository
from paygo.services.amounts import compute_final_amount, require_amount
from paygo.services.authorization_service import AuthorizationService
from paygo.services.locks import UnitLockRegistry, unit_locks
from paygo.settings import settings

logger = logging.getLogger(__name__)

U = TypeVar("U", bound=PayableUnit)


def _decision(approved: bool) -> StageDecision:
    return StageDecision.APPROVED if approved else StageDecision.REJECTED


def _refuse_if_settled(unit: PayableUnit, stage: str) -> None:
    if unit.status == ApprovalStatus.APPROVED:
        raise StageOutOfOrder(f"{unit.display_number} is already approved; {stage} decision cannot change")


def apply_pm_decision(unit: U, approved: bool, debit: object = 0, note: str = "", *, strict: bool = False) -> U:
    _refuse_if_settled(unit, "PM")
    pm_debit = to_money(require_amount("pm_debit", debit))

    updated = unit.model_copy(deep=True)
    updated.pm = ApprovalStage(decision=_decision(approved), debit=pm_debit, note=note)
    if approved and unit.status == ApprovalStatus.REJECTED:
        # PM is the re-entry point: later stages must decide again, keeping their debits and notes.
        updated.qc = updated.qc.model_copy(update={"decision": StageDecision.PENDING})
        updated.billing = updated.billing.model_copy(update={"decision": StageDecision.PENDING})
    updated.final_amount = compute_final_amount(updated.base_amount, updated.pm.debit, updated.qc.debit, strict=strict)
    return updated


def apply_qc_decision(unit: U, approved: bool, debit: object = 0, note: str = "", *, strict: bool = False) -> U:
    _refuse_if_settled(unit, "QC")
    if not unit.pm_approved:
        raise StageOutOfOrder(f"{unit.display_number} has not been approved by PM")
    if unit.status == ApprovalStatus.REJECTED:
        raise StageOutOfOrder(f"{unit.display_number} is rejected; PM must approve it again first")
    qc_debit = to_money(require_amount("qc_debit", debit))

    updated = unit.model_copy(deep=True)
    updated.qc = ApprovalStage(decision=_decision(approved), debit=qc_debit, note=note)
    updated.final_amount = compute_final_amount(updated.base_amount, updated.pm.debit, updated.qc.debit, strict=strict)
    return updated


def apply_billing_decision(
    unit: U,
    approved: bool,
    final_amount_override: object | None = None,
    note: str = "",
    *,
    strict: bool = False,
) -> U:
    _refuse_if_settled(unit, "Billing")
    if not unit.qc_approved:
        raise StageOutOfOrder(f"{unit.display_number} has not been approved by QC")
    if unit.status == ApprovalStatus.REJECTED:
        raise StageOutOfOrder(f"{unit.display_number} is rejected; PM must approve it again first")

    updated = unit.model_copy(deep=True)
    updated.billing = ApprovalStage(decision=_decision(approved), note=note)
    if approved:
        if final_amount_override is None:
            updated.final_amount = compute_final_amount(
                updated.base_amount, updated.pm.debit, updated.qc.debit, strict=strict
            )
        else:
            override = require_amount("final_amount", final_amount_override)
            if override > updated.base_amount:
                raise InvalidAmount(f"Final amount {override} exceeds base amount {updated.base_amount}")
            updated.final_amount = to_money(override)
    return updated


class ApprovalService(Generic[U]):
    def __init__(
        self,
        repo: PayableUnitRepository,
        kind: str,
        locks: UnitLockRegistry | None = None,
        authz: AuthorizationService | None = None,
        reject_excess_debit: bool | None = None,
    ) -> None:
        self.repo = repo
        self.kind = kind
        self.locks = locks or unit_locks
        self.authz = authz or AuthorizationService()
        self._reject_excess_debit = reject_excess_debit

    @property
    def strict(self) -> bool:
        if self._reject_excess_debit is None:
            return settings.reject_excess_debit
        return self._reject_excess_debit

    def lock_key(self, unit_uuid: str) -> str:
        return f"{self.kind}:{unit_uuid}"

    def _load(self, unit_uuid: str) -> U:
        unit = self.repo.get_by_uuid(unit_uuid)
        if unit is None:
            logger.warning("Approval failed: %s %s not found", self.kind, unit_uuid)
            raise NotFound(f"{self.kind} {unit_uuid} not found")
        return unit

    def _transition(self, unit_uuid: str, stage: str, apply) -> U:
        with self.locks.hold(self.lock_key(unit_uuid)):
            unit = self._load(unit_uuid)
            previous = unit.status
            try:
                updated = apply(unit)
            except (StageOutOfOrder, InvalidAmount) as exc:
                logger.warning("%s approval refused for %s %s: %s", stage, self.kind, unit.display_number, exc)
                raise
            result = self.repo.update_approval(updated)
        logger.info(
            "%s %s %s decision: %s -> %s, final=%s",
            self.kind,
            result.display_number,
            stage,
            previous.value,
            result.status.value,
            result.final_amount,
        )
        return result

    def approve_pm(self, unit_uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor) -> U:
        self.authz.require(self.authz.can_approve_pm(actor), actor, f"approve {self.kind} as PM")
        return self._transition(
            unit_uuid,
            "PM",
            lambda unit: apply_pm_decision(unit, approved, debit, note, strict=self.strict),
        )

    def approve_qc(self, unit_uuid: str, approved: bool, debit: object = 0, note: str = "", *, actor: Actor) -> U:
        self.authz.require(self.authz.can_approve_qc(actor), actor, f"approve {self.kind} as QC")
        return self._transition(
            unit_uuid,
            "QC",
            lambda unit: apply_qc_decision(unit, approved, debit, note, strict=self.strict),
        )

    def approve_billing(
        self,
        unit_uuid: str,
        approved: bool,
        final_amount_override: object | None = None,
        note: str = "",
        *,
        actor: Actor,
    ) -> U:
        self.authz.require(self.authz.can_approve_billing(actor), actor, f"approve {self.kind} for billing")
        return self._transition(
            unit_uuid,
            "Billing",
            lambda unit: apply_billing_decision(unit, approved, final_amount_override, note, strict=self.strict),
        )
