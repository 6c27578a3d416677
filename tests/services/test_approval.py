from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from paygo.exceptions import DebitExceedsBaseWarning, Forbidden, InvalidAmount, NotFound, StageOutOfOrder
from paygo.models.approval import ApprovalStatus, StageDecision
from paygo.repositories.sqlalchemy import SQLAlchemyBillRepository
from paygo.services.approval import (
    ApprovalService,
    apply_billing_decision,
    apply_pm_decision,
    apply_qc_decision,
)
from paygo.services.locks import UnitLockRegistry
from tests.conftest import (
    ADMIN,
    BILLING_ENGINEER,
    PROJECT_MANAGER,
    QC,
    SITE_ENGINEER,
    VIEWER,
    _sample_bill,
    _sample_record,
)


class TestScenarioA:
    def test_full_pipeline(self):
        bill = _sample_bill()
        assert bill.base_amount == Decimal("1000.00")

        bill = apply_pm_decision(bill, True, 50)
        assert bill.final_amount == Decimal("950.00")
        assert bill.status == ApprovalStatus.PENDING_QC

        bill = apply_qc_decision(bill, True, 0)
        assert bill.final_amount == Decimal("950.00")
        assert bill.status == ApprovalStatus.PENDING_BILLING

        bill = apply_billing_decision(bill, True)
        assert bill.status == ApprovalStatus.APPROVED
        assert bill.final_amount == Decimal("950.00")


class TestPMStage:
    def test_reject_halts_pipeline(self):
        bill = apply_pm_decision(_sample_bill(), False, 0, "Wrong quantity")
        assert bill.status == ApprovalStatus.REJECTED
        assert bill.pm.note == "Wrong quantity"

    def test_does_not_mutate_input(self):
        original = _sample_bill()
        apply_pm_decision(original, True, 50)
        assert original.pm.decision == StageDecision.PENDING
        assert original.final_amount == Decimal("1000.00")

    def test_negative_debit(self):
        with pytest.raises(InvalidAmount):
            apply_pm_decision(_sample_bill(), True, -10)

    def test_idempotent_by_value(self):
        once = apply_pm_decision(_sample_bill(), True, 50, "ok")
        twice = apply_pm_decision(once, True, 50, "ok")
        assert twice.pm == once.pm
        assert twice.final_amount == once.final_amount
        assert twice.status == once.status

    def test_reapproval_after_rejection_resets_later_stages(self):
        bill = apply_pm_decision(_sample_bill(), True, 50)
        bill = apply_qc_decision(bill, False, 25, "Cracks")
        assert bill.status == ApprovalStatus.REJECTED

        bill = apply_pm_decision(bill, True, 50)
        assert bill.status == ApprovalStatus.PENDING_QC
        assert bill.qc.decision == StageDecision.PENDING
        assert bill.qc.debit == Decimal("25")
        assert bill.qc.note == "Cracks"
        assert bill.final_amount == Decimal("925.00")

    def test_excess_debit_clamps_with_warning(self):
        with pytest.warns(DebitExceedsBaseWarning):
            bill = apply_pm_decision(_sample_bill(), True, 1500)
        assert bill.final_amount == Decimal("0.00")

    def test_excess_debit_strict(self):
        with pytest.raises(InvalidAmount):
            apply_pm_decision(_sample_bill(), True, 1500, strict=True)


class TestQCStage:
    def test_requires_pm_approval(self):
        with pytest.raises(StageOutOfOrder):
            apply_qc_decision(_sample_bill(), True, 0)

    def test_scenario_d_rejected_unit(self):
        bill = apply_pm_decision(_sample_bill(), False, 75)
        with pytest.raises(StageOutOfOrder):
            apply_qc_decision(bill, True, 0)

    def test_both_debits_apply(self):
        bill = apply_pm_decision(_sample_bill(), True, 50)
        bill = apply_qc_decision(bill, True, 100)
        assert bill.final_amount == Decimal("850.00")

    def test_reject(self):
        bill = apply_pm_decision(_sample_bill(), True, 0)
        bill = apply_qc_decision(bill, False, 0)
        assert bill.status == ApprovalStatus.REJECTED


class TestBillingStage:
    def _qc_approved(self):
        bill = apply_pm_decision(_sample_bill(), True, 50)
        return apply_qc_decision(bill, True, 0)

    def test_requires_qc_approval(self):
        bill = apply_pm_decision(_sample_bill(), True, 0)
        with pytest.raises(StageOutOfOrder):
            apply_billing_decision(bill, True)

    def test_override(self):
        bill = apply_billing_decision(self._qc_approved(), True, "949.995")
        assert bill.final_amount == Decimal("950.00")
        assert bill.status == ApprovalStatus.APPROVED

    def test_override_above_base(self):
        with pytest.raises(InvalidAmount, match="exceeds base"):
            apply_billing_decision(self._qc_approved(), True, 1000.01)

    def test_override_negative(self):
        with pytest.raises(InvalidAmount):
            apply_billing_decision(self._qc_approved(), True, -1)

    def test_reject(self):
        bill = apply_billing_decision(self._qc_approved(), False, note="Duplicate")
        assert bill.status == ApprovalStatus.REJECTED
        assert bill.final_amount == Decimal("950.00")

    @pytest.mark.parametrize("apply", [apply_pm_decision, apply_qc_decision, apply_billing_decision])
    def test_approved_unit_is_settled(self, apply):
        bill = apply_billing_decision(self._qc_approved(), True)
        with pytest.raises(StageOutOfOrder):
            apply(bill, True)


class TestWeeklyRecordPipeline:
    def test_records_share_the_pipeline(self):
        record = _sample_record()
        record = apply_pm_decision(record, True, 1000)
        record = apply_qc_decision(record, True, 500)
        record = apply_billing_decision(record, True)
        assert record.status == ApprovalStatus.APPROVED
        assert record.final_amount == Decimal("6500.00")


class TestApprovalService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_repo.update_approval.side_effect = lambda unit: unit
        self.locks = UnitLockRegistry(timeout=1)
        self.service = ApprovalService(self.mock_repo, "bill", locks=self.locks, reject_excess_debit=False)

    def test_lock_key(self):
        assert self.service.lock_key("01ABC") == "bill:01ABC"

    def test_approve_pm_persists(self):
        self.mock_repo.get_by_uuid.return_value = _sample_bill(uuid="u1")
        result = self.service.approve_pm("u1", True, 50, "ok", actor=PROJECT_MANAGER)
        assert result.status == ApprovalStatus.PENDING_QC
        persisted = self.mock_repo.update_approval.call_args[0][0]
        assert persisted.final_amount == Decimal("950.00")
        assert persisted.pm.note == "ok"

    @pytest.mark.parametrize("actor", [SITE_ENGINEER, QC, BILLING_ENGINEER, VIEWER])
    def test_pm_role_gate(self, actor):
        with pytest.raises(Forbidden):
            self.service.approve_pm("u1", True, actor=actor)
        self.mock_repo.get_by_uuid.assert_not_called()

    @pytest.mark.parametrize("actor", [SITE_ENGINEER, PROJECT_MANAGER, BILLING_ENGINEER, VIEWER])
    def test_qc_role_gate(self, actor):
        with pytest.raises(Forbidden):
            self.service.approve_qc("u1", True, actor=actor)

    @pytest.mark.parametrize("actor", [SITE_ENGINEER, PROJECT_MANAGER, QC, VIEWER])
    def test_billing_role_gate(self, actor):
        with pytest.raises(Forbidden):
            self.service.approve_billing("u1", True, actor=actor)

    def test_admin_can_run_every_stage(self):
        self.mock_repo.get_by_uuid.return_value = _sample_bill(uuid="u1")
        bill = self.service.approve_pm("u1", True, 0, actor=ADMIN)
        self.mock_repo.get_by_uuid.return_value = bill
        bill = self.service.approve_qc("u1", True, 0, actor=ADMIN)
        self.mock_repo.get_by_uuid.return_value = bill
        bill = self.service.approve_billing("u1", True, actor=ADMIN)
        assert bill.status == ApprovalStatus.APPROVED

    def test_not_found(self):
        self.mock_repo.get_by_uuid.return_value = None
        with pytest.raises(NotFound):
            self.service.approve_pm("missing", True, actor=ADMIN)

    def test_unknown_uuids_leave_no_locks(self):
        self.mock_repo.get_by_uuid.return_value = None
        for n in range(100):
            with pytest.raises(NotFound):
                self.service.approve_pm(f"missing-{n}", True, actor=ADMIN)
        assert len(self.locks) == 0

    def test_out_of_order_not_persisted(self):
        self.mock_repo.get_by_uuid.return_value = _sample_bill(uuid="u1")
        with pytest.raises(StageOutOfOrder):
            self.service.approve_qc("u1", True, actor=QC)
        self.mock_repo.update_approval.assert_not_called()

    def test_strict_mode_from_constructor(self):
        service = ApprovalService(self.mock_repo, "bill", locks=self.locks, reject_excess_debit=True)
        self.mock_repo.get_by_uuid.return_value = _sample_bill(uuid="u1")
        with pytest.raises(InvalidAmount):
            service.approve_pm("u1", True, 5000, actor=ADMIN)
        self.mock_repo.update_approval.assert_not_called()

    def test_strict_mode_follows_settings(self, monkeypatch):
        from paygo.settings import settings

        service = ApprovalService(self.mock_repo, "bill", locks=self.locks)
        monkeypatch.setattr(settings, "reject_excess_debit", True)
        assert service.strict is True


class TestPersistedDebits:
    def setup_method(self):
        self.locks = UnitLockRegistry(timeout=1)

    def _service(self, db_connection):
        return ApprovalService(SQLAlchemyBillRepository(db_connection), "bill", locks=self.locks)

    def test_sub_paise_debit_is_rounded_before_storing(self, db_connection):
        repo = SQLAlchemyBillRepository(db_connection)
        bill = repo.create(_sample_bill())
        service = self._service(db_connection)

        service.approve_pm(bill.uuid, True, Decimal("0.015"), actor=PROJECT_MANAGER)
        stored = repo.get_by_uuid(bill.uuid)
        assert stored.pm.debit == Decimal("0.02")
        assert stored.final_amount == Decimal("999.98")
        assert stored.final_amount == stored.base_amount - stored.pm.debit - stored.qc.debit

    def test_final_amount_holds_after_both_debits(self, db_connection):
        repo = SQLAlchemyBillRepository(db_connection)
        bill = repo.create(_sample_bill())
        service = self._service(db_connection)

        service.approve_pm(bill.uuid, True, "10.125", actor=PROJECT_MANAGER)
        service.approve_qc(bill.uuid, True, "0.005", actor=QC)
        stored = repo.get_by_uuid(bill.uuid)
        assert stored.pm.debit == Decimal("10.13")
        assert stored.qc.debit == Decimal("0.01")
        assert stored.final_amount == Decimal("989.86")
        assert stored.final_amount == stored.base_amount - stored.pm.debit - stored.qc.debit
