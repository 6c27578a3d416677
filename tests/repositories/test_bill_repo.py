from decimal import Decimal

import pytest

from paygo.exceptions import DuplicateIdentifier
from paygo.models.approval import ApprovalStatus, StageDecision
from paygo.models.payment import Payment, PaymentStatus
from paygo.services.approval import apply_pm_decision, apply_qc_decision


class TestBillRepoCRUD:
    def test_create_and_get(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())

        assert created.id is not None
        assert len(created.uuid) == 26
        assert created.bill_number == "BILL-1718000000000-000"
        assert created.base_amount == Decimal("1000.00")
        assert created.final_amount == Decimal("1000.00")
        assert created.status == ApprovalStatus.PENDING_PM
        assert created.created_at is not None

    def test_decimal_fields_round_trip_exactly(self, bill_repo, sample_bill):
        created = bill_repo.create(
            sample_bill(unit_price=Decimal("33.335"), quantity=Decimal("2.5"), base_amount=Decimal("83.34"))
        )
        fetched = bill_repo.get_by_uuid(created.uuid)
        assert fetched.unit_price == Decimal("33.335")
        assert str(fetched.quantity) == "2.5"
        assert fetched.base_amount == Decimal("83.34")

    def test_get_not_found(self, bill_repo):
        assert bill_repo.get_by_id(9999) is None
        assert bill_repo.get_by_uuid("nonexistent") is None
        assert bill_repo.get_by_number("BILL-NOPE") is None

    def test_get_by_number(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())
        assert bill_repo.get_by_number(created.bill_number).id == created.id

    def test_duplicate_number(self, bill_repo, sample_bill):
        bill_repo.create(sample_bill())
        with pytest.raises(DuplicateIdentifier):
            bill_repo.create(sample_bill())
        assert len(bill_repo.list_all()) == 1

    def test_list_all_newest_first(self, bill_repo, sample_bill):
        bill_repo.create(sample_bill(display_number="BILL-0000000000001-000"))
        bill_repo.create(sample_bill(display_number="BILL-0000000000002-000"))
        numbers = [b.bill_number for b in bill_repo.list_all()]
        assert numbers == ["BILL-0000000000002-000", "BILL-0000000000001-000"]

    def test_update_approval(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())
        decided = apply_qc_decision(apply_pm_decision(created, True, "50.50", "short"), False, 10, "cracks")
        updated = bill_repo.update_approval(decided)

        assert updated.pm.decision == StageDecision.APPROVED
        assert updated.pm.debit == Decimal("50.50")
        assert updated.pm.note == "short"
        assert updated.qc.decision == StageDecision.REJECTED
        assert updated.qc.debit == Decimal("10.00")
        assert updated.final_amount == Decimal("939.50")
        assert updated.status == ApprovalStatus.REJECTED

    def test_update_approval_without_id(self, bill_repo, sample_bill):
        with pytest.raises(ValueError):
            bill_repo.update_approval(sample_bill())

    def test_delete(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())
        bill_repo.delete(created.id)
        assert bill_repo.get_by_id(created.id) is None

    def test_delete_with_payments(self, bill_repo, payment_repo, approved_bill):
        created = bill_repo.create(approved_bill())
        for i, amount in enumerate(("100", "200")):
            payment_repo.create(
                Payment(
                    payment_id=f"PAY-000000000000{i}-000",
                    bill_number=created.bill_number,
                    paid_amount=Decimal(amount),
                    bill_total=created.final_amount,
                    status=PaymentStatus.PARTIAL,
                )
            )
        removed = bill_repo.delete_with_payments(created.id, created.bill_number)

        assert removed == 2
        assert bill_repo.get_by_id(created.id) is None
        assert payment_repo.list_by_bill_number(created.bill_number) == []
