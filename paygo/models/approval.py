from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class StageDecision(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalStatus(str, Enum):
    PENDING_PM = "Pending PM"
    PENDING_QC = "Pending QC"
    PENDING_BILLING = "Pending Billing"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Stage(str, Enum):
    PM = "pm"
    QC = "qc"
    BILLING = "billing"


class ApprovalStage(BaseModel):
    decision: StageDecision = StageDecision.PENDING
    debit: Decimal = Decimal("0")  # rupees; always zero for the billing stage
    note: str = ""

    @property
    def approved(self) -> bool:
        return self.decision == StageDecision.APPROVED


def derive_status(pm: ApprovalStage, qc: ApprovalStage, billing: ApprovalStage) -> ApprovalStatus:
    """Status is the first stage, in PM -> QC -> Billing order, that is not approved."""
    for stage, waiting in (
        (pm, ApprovalStatus.PENDING_PM),
        (qc, ApprovalStatus.PENDING_QC),
        (billing, ApprovalStatus.PENDING_BILLING),
    ):
        if stage.decision == StageDecision.REJECTED:
            return ApprovalStatus.REJECTED
        if stage.decision == StageDecision.PENDING:
            return waiting
    return ApprovalStatus.APPROVED


class PayableUnit(BaseModel):
    """Shape shared by bills and weekly labour records."""

    id: int | None = None
    uuid: str = ""
    display_number: str = ""
    project: str
    contractor: str
    trade: str = ""
    base_amount: Decimal = Decimal("0")
    pm: ApprovalStage = Field(default_factory=ApprovalStage)
    qc: ApprovalStage = Field(default_factory=ApprovalStage)
    billing: ApprovalStage = Field(default_factory=ApprovalStage)
    final_amount: Decimal = Decimal("0")
    created_by: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status(self) -> ApprovalStatus:
        return derive_status(self.pm, self.qc, self.billing)

    @property
    def pm_approved(self) -> bool:
        return self.pm.approved

    @property
    def qc_approved(self) -> bool:
        return self.qc.approved

    @property
    def billing_approved(self) -> bool:
        return self.billing.approved
