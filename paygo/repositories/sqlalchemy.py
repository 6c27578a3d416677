from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from ulid import ULID

from paygo.constants import IST_TZ
from paygo.exceptions import DuplicateIdentifier
from paygo.models import PAISE, to_money
from paygo.models.approval import ApprovalStage, StageDecision
from paygo.models.bill import Bill
from paygo.models.contractor import Contractor
from paygo.models.nmr import NMREntry, WeeklyRecord
from paygo.models.payment import Payment, PaymentStatus
from paygo.models.project import Project
from paygo.models.roles import Role
from paygo.models.user import User
from paygo.repositories.base import (
    BillRepository,
    ContractorRepository,
    PaymentRepository,
    ProjectRepository,
    UserRepository,
    WeeklyRecordRepository,
)


def _now() -> datetime:
    return datetime.now(IST_TZ)


def _paise(amount: Decimal) -> int:
    """Money is stored as integer paise: Decimal('950.50') -> 95050"""
    return int(to_money(Decimal(amount)) * 100)


def _rupees(paise: int | None) -> Decimal:
    return (Decimal(int(paise or 0)) / 100).quantize(PAISE)


def _num(value: Decimal) -> str:
    """Quantities are bound as strings so SQLite never sees a float."""
    return str(value)


def _dec(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _stage_params(unit) -> dict:
    return {
        "pm_decision": unit.pm.decision.value,
        "pm_debit": _paise(unit.pm.debit),
        "pm_note": unit.pm.note,
        "qc_decision": unit.qc.decision.value,
        "qc_debit": _paise(unit.qc.debit),
        "qc_note": unit.qc.note,
        "billing_decision": unit.billing.decision.value,
        "billing_note": unit.billing.note,
        "final_amount": _paise(unit.final_amount),
    }


def _stages_from_row(row: RowMapping) -> dict:
    return {
        "pm": ApprovalStage(
            decision=StageDecision(row["pm_decision"]),
            debit=_rupees(row["pm_debit"]),
            note=row["pm_note"],
        ),
        "qc": ApprovalStage(
            decision=StageDecision(row["qc_decision"]),
            debit=_rupees(row["qc_debit"]),
            note=row["qc_note"],
        ),
        "billing": ApprovalStage(
            decision=StageDecision(row["billing_decision"]),
            note=row["billing_note"],
        ),
    }


_STAGE_COLUMNS = (
    "pm_decision = :pm_decision, pm_debit = :pm_debit, pm_note = :pm_note, "
    "qc_decision = :qc_decision, qc_debit = :qc_debit, qc_note = :qc_note, "
    "billing_decision = :billing_decision, billing_note = :billing_note, "
    "final_amount = :final_amount, updated_at = :updated_at"
)


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, bill: Bill) -> Bill:
        bill_uuid = str(ULID())
        now = _now()
        params = {
            "uuid": bill_uuid,
            "bill_number": bill.display_number,
            "project": bill.project,
            "contractor": bill.contractor,
            "project_date": bill.project_date,
            "trade": bill.trade,
            "unit": bill.unit,
            "unit_price": _num(bill.unit_price),
            "quantity": _num(bill.quantity),
            "description": bill.description,
            "location": bill.location,
            "authorized_engineer": bill.authorized_engineer,
            "base_amount": _paise(bill.base_amount),
            "created_by": bill.created_by,
            "created_at": now,
            "updated_at": now,
            **_stage_params(bill),
        }
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO bills (uuid, bill_number, project, contractor, project_date, trade, unit, "
                    "unit_price, quantity, description, location, authorized_engineer, base_amount, "
                    "pm_decision, pm_debit, pm_note, qc_decision, qc_debit, qc_note, "
                    "billing_decision, billing_note, final_amount, created_by, created_at, updated_at) "
                    "VALUES (:uuid, :bill_number, :project, :contractor, :project_date, :trade, :unit, "
                    ":unit_price, :quantity, :description, :location, :authorized_engineer, :base_amount, "
                    ":pm_decision, :pm_debit, :pm_note, :qc_decision, :qc_debit, :qc_note, "
                    ":billing_decision, :billing_note, :final_amount, :created_by, :created_at, :updated_at)"
                ),
                params,
            )
        except IntegrityError as exc:
            self.conn.rollback()
            raise DuplicateIdentifier(f"Bill number {bill.display_number} already exists") from exc
        bill_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    @staticmethod
    def _row_to_bill(row: RowMapping) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            display_number=row["bill_number"],
            project=row["project"],
            contractor=row["contractor"],
            project_date=row["project_date"],
            trade=row["trade"],
            unit=row["unit"],
            unit_price=_dec(row["unit_price"]),
            quantity=_dec(row["quantity"]),
            description=row["description"],
            location=row["location"],
            authorized_engineer=row["authorized_engineer"],
            base_amount=_rupees(row["base_amount"]),
            final_amount=_rupees(row["final_amount"]),
            created_by=row["created_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            **_stages_from_row(row),
        )

    def _fetch_one(self, where: str, params: dict) -> Bill | None:
        row = self.conn.execute(text(f"SELECT * FROM bills WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_bill(row)

    def get_by_id(self, unit_id: int) -> Bill | None:
        return self._fetch_one("id = :id", {"id": unit_id})

    def get_by_uuid(self, uuid: str) -> Bill | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_number(self, display_number: str) -> Bill | None:
        return self._fetch_one("bill_number = :bill_number", {"bill_number": display_number})

    def list_all(self) -> list[Bill]:
        rows = self.conn.execute(text("SELECT * FROM bills ORDER BY bill_number DESC")).mappings().fetchall()
        return [self._row_to_bill(row) for row in rows]

    def update_approval(self, unit: Bill) -> Bill:
        if unit.id is None:
            raise ValueError("Cannot update approval for bill without an id")
        self.conn.execute(
            text(f"UPDATE bills SET {_STAGE_COLUMNS} WHERE id = :id"),
            {**_stage_params(unit), "updated_at": _now(), "id": unit.id},
        )
        self.conn.commit()
        result = self.get_by_id(unit.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve bill after update (id={unit.id})")
        return result

    def delete(self, unit_id: int) -> None:
        self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": unit_id})
        self.conn.commit()

    def delete_with_payments(self, unit_id: int, bill_number: str) -> int:
        result = self.conn.execute(
            text("DELETE FROM payments WHERE bill_number = :bill_number"),
            {"bill_number": bill_number},
        )
        removed = result.rowcount
        self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": unit_id})
        self.conn.commit()
        return removed


class SQLAlchemyWeeklyRecordRepository(WeeklyRecordRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, record: WeeklyRecord) -> WeeklyRecord:
        record_uuid = str(ULID())
        now = _now()
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO nmrs (uuid, nmr_number, project, contractor, trade, engineer_name, "
                    "week_start, week_end, base_amount, pm_decision, pm_debit, pm_note, "
                    "qc_decision, qc_debit, qc_note, billing_decision, billing_note, final_amount, "
                    "created_by, created_at, updated_at) "
                    "VALUES (:uuid, :nmr_number, :project, :contractor, :trade, :engineer_name, "
                    ":week_start, :week_end, :base_amount, :pm_decision, :pm_debit, :pm_note, "
                    ":qc_decision, :qc_debit, :qc_note, :billing_decision, :billing_note, :final_amount, "
                    ":created_by, :created_at, :updated_at)"
                ),
                {
                    "uuid": record_uuid,
                    "nmr_number": record.display_number,
                    "project": record.project,
                    "contractor": record.contractor,
                    "trade": record.trade,
                    "engineer_name": record.engineer_name,
                    "week_start": record.week_start,
                    "week_end": record.week_end,
                    "base_amount": _paise(record.base_amount),
                    "created_by": record.created_by,
                    "created_at": now,
                    "updated_at": now,
                    **_stage_params(record),
                },
            )
        except IntegrityError as exc:
            self.conn.rollback()
            raise DuplicateIdentifier(f"NMR number {record.display_number} already exists") from exc
        record_id = result.lastrowid
        for i, entry in enumerate(record.entries):
            self.conn.execute(
                text(
                    "INSERT INTO nmr_entries (nmr_id, entry_date, labour_type, persons, rate, hours, "
                    "duty, amount, sort_order) "
                    "VALUES (:nmr_id, :entry_date, :labour_type, :persons, :rate, :hours, "
                    ":duty, :amount, :sort_order)"
                ),
                {
                    "nmr_id": record_id,
                    "entry_date": entry.date,
                    "labour_type": entry.labour_type,
                    "persons": _num(entry.persons),
                    "rate": _num(entry.rate),
                    "hours": _num(entry.hours),
                    "duty": entry.duty,
                    "amount": _paise(entry.amount),
                    "sort_order": i,
                },
            )
        self.conn.commit()
        created = self.get_by_id(record_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve NMR after create (id={record_id})")
        return created

    @staticmethod
    def _build_record(row: RowMapping, entry_rows: list[RowMapping]) -> WeeklyRecord:
        return WeeklyRecord(
            id=row["id"],
            uuid=row["uuid"],
            display_number=row["nmr_number"],
            project=row["project"],
            contractor=row["contractor"],
            trade=row["trade"],
            engineer_name=row["engineer_name"],
            week_start=row["week_start"],
            week_end=row["week_end"],
            base_amount=_rupees(row["base_amount"]),
            final_amount=_rupees(row["final_amount"]),
            created_by=row["created_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            entries=[
                NMREntry(
                    id=entry["id"],
                    record_id=entry["nmr_id"],
                    date=entry["entry_date"],
                    labour_type=entry["labour_type"],
                    persons=_dec(entry["persons"]),
                    rate=_dec(entry["rate"]),
                    hours=_dec(entry["hours"]),
                    duty=entry["duty"],
                    amount=_rupees(entry["amount"]),
                    sort_order=entry["sort_order"],
                )
                for entry in entry_rows
            ],
            **_stages_from_row(row),
        )

    def _row_to_record(self, row: RowMapping) -> WeeklyRecord:
        entries = (
            self.conn.execute(
                text("SELECT * FROM nmr_entries WHERE nmr_id = :nmr_id ORDER BY sort_order"),
                {"nmr_id": row["id"]},
            )
            .mappings()
            .fetchall()
        )
        return self._build_record(row, list(entries))

    def _fetch_one(self, where: str, params: dict) -> WeeklyRecord | None:
        row = self.conn.execute(text(f"SELECT * FROM nmrs WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def get_by_id(self, unit_id: int) -> WeeklyRecord | None:
        return self._fetch_one("id = :id", {"id": unit_id})

    def get_by_uuid(self, uuid: str) -> WeeklyRecord | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_number(self, display_number: str) -> WeeklyRecord | None:
        return self._fetch_one("nmr_number = :nmr_number", {"nmr_number": display_number})

    def list_all(self) -> list[WeeklyRecord]:
        rows = self.conn.execute(text("SELECT * FROM nmrs ORDER BY nmr_number DESC")).mappings().fetchall()
        if not rows:
            return []
        record_ids = [row["id"] for row in rows]
        placeholders = ", ".join(f":id{i}" for i in range(len(record_ids)))
        params = {f"id{i}": rid for i, rid in enumerate(record_ids)}
        all_entries = (
            self.conn.execute(
                text(f"SELECT * FROM nmr_entries WHERE nmr_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        entries_by_record: dict[int, list[RowMapping]] = {}
        for entry in all_entries:
            entries_by_record.setdefault(entry["nmr_id"], []).append(entry)
        return [self._build_record(row, entries_by_record.get(row["id"], [])) for row in rows]

    def update_approval(self, unit: WeeklyRecord) -> WeeklyRecord:
        if unit.id is None:
            raise ValueError("Cannot update approval for NMR without an id")
        self.conn.execute(
            text(f"UPDATE nmrs SET {_STAGE_COLUMNS} WHERE id = :id"),
            {**_stage_params(unit), "updated_at": _now(), "id": unit.id},
        )
        self.conn.commit()
        result = self.get_by_id(unit.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve NMR after update (id={unit.id})")
        return result

    def delete(self, unit_id: int) -> None:
        self.conn.execute(text("DELETE FROM nmr_entries WHERE nmr_id = :id"), {"id": unit_id})
        self.conn.execute(text("DELETE FROM nmrs WHERE id = :id"), {"id": unit_id})
        self.conn.commit()


class SQLAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, payment: Payment) -> Payment:
        payment_uuid = str(ULID())
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO payments (uuid, payment_id, bill_number, payment_date, paid_amount, "
                    "project, contractor, bill_total, balance, status, created_by, created_at) "
                    "VALUES (:uuid, :payment_id, :bill_number, :payment_date, :paid_amount, "
                    ":project, :contractor, :bill_total, :balance, :status, :created_by, :created_at)"
                ),
                {
                    "uuid": payment_uuid,
                    "payment_id": payment.payment_id,
                    "bill_number": payment.bill_number,
                    "payment_date": payment.payment_date,
                    "paid_amount": _paise(payment.paid_amount),
                    "project": payment.project,
                    "contractor": payment.contractor,
                    "bill_total": _paise(payment.bill_total),
                    "balance": _paise(payment.balance),
                    "status": payment.status.value,
                    "created_by": payment.created_by,
                    "created_at": _now(),
                },
            )
        except IntegrityError as exc:
            self.conn.rollback()
            raise DuplicateIdentifier(f"Payment id {payment.payment_id} already exists") from exc
        payment_id = result.lastrowid
        self.conn.commit()
        row = self.conn.execute(text("SELECT * FROM payments WHERE id = :id"), {"id": payment_id}).mappings().fetchone()
        if row is None:
            raise RuntimeError(f"Failed to retrieve payment after create (id={payment_id})")
        return self._row_to_payment(row)

    @staticmethod
    def _row_to_payment(row: RowMapping) -> Payment:
        return Payment(
            id=row["id"],
            uuid=row["uuid"],
            payment_id=row["payment_id"],
            bill_number=row["bill_number"],
            payment_date=row["payment_date"],
            paid_amount=_rupees(row["paid_amount"]),
            project=row["project"],
            contractor=row["contractor"],
            bill_total=_rupees(row["bill_total"]),
            balance=_rupees(row["balance"]),
            status=PaymentStatus(row["status"]),
            created_by=row["created_by"],
            created_at=row["created_at"],
        )

    def get_by_uuid(self, uuid: str) -> Payment | None:
        row = self.conn.execute(text("SELECT * FROM payments WHERE uuid = :uuid"), {"uuid": uuid}).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_payment(row)

    def list_all(self) -> list[Payment]:
        rows = self.conn.execute(text("SELECT * FROM payments ORDER BY payment_id DESC")).mappings().fetchall()
        return [self._row_to_payment(row) for row in rows]

    def list_by_bill_number(self, bill_number: str) -> list[Payment]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM payments WHERE bill_number = :bill_number ORDER BY payment_id"),
                {"bill_number": bill_number},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_payment(row) for row in rows]

    def delete(self, payment_id: int) -> None:
        self.conn.execute(text("DELETE FROM payments WHERE id = :id"), {"id": payment_id})
        self.conn.commit()


class SQLAlchemyProjectRepository(ProjectRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _params(project: Project) -> dict:
        return {
            "project_name": project.project_name,
            "client_name": project.client_name,
            "start_date": project.start_date,
            "estimated_budget": _paise(project.estimated_budget),
            "site_address": project.site_address,
            "office_address": project.office_address,
            "contact_number": project.contact_number,
            "location_link1": project.location_link1,
            "location_link2": project.location_link2,
            "note": project.note,
            "status": project.status,
        }

    def create(self, project: Project) -> Project:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO projects (uuid, project_name, client_name, start_date, estimated_budget, "
                "site_address, office_address, contact_number, location_link1, location_link2, note, "
                "status, created_at, updated_at) "
                "VALUES (:uuid, :project_name, :client_name, :start_date, :estimated_budget, "
                ":site_address, :office_address, :contact_number, :location_link1, :location_link2, :note, "
                ":status, :created_at, :updated_at)"
            ),
            {**self._params(project), "uuid": str(ULID()), "created_at": now, "updated_at": now},
        )
        project_id = result.lastrowid
        self.conn.commit()
        created = self._get_by_id(project_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve project after create (id={project_id})")
        return created

    @staticmethod
    def _row_to_project(row: RowMapping) -> Project:
        return Project(
            id=row["id"],
            uuid=row["uuid"],
            project_name=row["project_name"],
            client_name=row["client_name"],
            start_date=row["start_date"],
            estimated_budget=_rupees(row["estimated_budget"]),
            site_address=row["site_address"],
            office_address=row["office_address"],
            contact_number=row["contact_number"],
            location_link1=row["location_link1"],
            location_link2=row["location_link2"],
            note=row["note"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _get_by_id(self, project_id: int) -> Project | None:
        row = self.conn.execute(text("SELECT * FROM projects WHERE id = :id"), {"id": project_id}).mappings().fetchone()
        return self._row_to_project(row) if row is not None else None

    def get_by_uuid(self, uuid: str) -> Project | None:
        row = self.conn.execute(text("SELECT * FROM projects WHERE uuid = :uuid"), {"uuid": uuid}).mappings().fetchone()
        return self._row_to_project(row) if row is not None else None

    def find_by_name(self, project_name: str) -> Project | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM projects WHERE project_name = :name ORDER BY id LIMIT 1"),
                {"name": project_name},
            )
            .mappings()
            .fetchone()
        )
        return self._row_to_project(row) if row is not None else None

    def list_all(self) -> list[Project]:
        rows = self.conn.execute(text("SELECT * FROM projects ORDER BY project_name")).mappings().fetchall()
        return [self._row_to_project(row) for row in rows]

    def update(self, project: Project) -> Project:
        if project.id is None:
            raise ValueError("Cannot update project without an id")
        self.conn.execute(
            text(
                "UPDATE projects SET project_name = :project_name, client_name = :client_name, "
                "start_date = :start_date, estimated_budget = :estimated_budget, "
                "site_address = :site_address, office_address = :office_address, "
                "contact_number = :contact_number, location_link1 = :location_link1, "
                "location_link2 = :location_link2, note = :note, status = :status, "
                "updated_at = :updated_at WHERE id = :id"
            ),
            {**self._params(project), "updated_at": _now(), "id": project.id},
        )
        self.conn.commit()
        result = self._get_by_id(project.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve project after update (id={project.id})")
        return result

    def delete(self, project_id: int) -> None:
        self.conn.execute(text("DELETE FROM projects WHERE id = :id"), {"id": project_id})
        self.conn.commit()


class SQLAlchemyContractorRepository(ContractorRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _params(contractor: Contractor) -> dict:
        return {
            "contractor_name": contractor.contractor_name,
            "project": contractor.project,
            "trade": contractor.trade,
            "date": contractor.date,
            "unit": contractor.unit,
            "unit_price": _num(contractor.unit_price),
            "estimated_qty": _num(contractor.estimated_qty),
            "estimated_amount": _paise(contractor.estimated_amount),
            "mobile": contractor.mobile,
            "email": contractor.email,
            "address": contractor.address,
        }

    def create(self, contractor: Contractor) -> Contractor:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO contractors (uuid, contractor_name, project, trade, date, unit, unit_price, "
                "estimated_qty, estimated_amount, mobile, email, address, created_at, updated_at) "
                "VALUES (:uuid, :contractor_name, :project, :trade, :date, :unit, :unit_price, "
                ":estimated_qty, :estimated_amount, :mobile, :email, :address, :created_at, :updated_at)"
            ),
            {**self._params(contractor), "uuid": str(ULID()), "created_at": now, "updated_at": now},
        )
        contractor_id = result.lastrowid
        self.conn.commit()
        created = self._get_by_id(contractor_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve contractor after create (id={contractor_id})")
        return created

    @staticmethod
    def _row_to_contractor(row: RowMapping) -> Contractor:
        return Contractor(
            id=row["id"],
            uuid=row["uuid"],
            contractor_name=row["contractor_name"],
            project=row["project"],
            trade=row["trade"],
            date=row["date"],
            unit=row["unit"],
            unit_price=_dec(row["unit_price"]),
            estimated_qty=_dec(row["estimated_qty"]),
            estimated_amount=_rupees(row["estimated_amount"]),
            mobile=row["mobile"],
            email=row["email"],
            address=row["address"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _get_by_id(self, contractor_id: int) -> Contractor | None:
        row = (
            self.conn.execute(text("SELECT * FROM contractors WHERE id = :id"), {"id": contractor_id})
            .mappings()
            .fetchone()
        )
        return self._row_to_contractor(row) if row is not None else None

    def get_by_uuid(self, uuid: str) -> Contractor | None:
        row = (
            self.conn.execute(text("SELECT * FROM contractors WHERE uuid = :uuid"), {"uuid": uuid})
            .mappings()
            .fetchone()
        )
        return self._row_to_contractor(row) if row is not None else None

    def find_by_name(self, contractor_name: str) -> Contractor | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM contractors WHERE contractor_name = :name ORDER BY id LIMIT 1"),
                {"name": contractor_name},
            )
            .mappings()
            .fetchone()
        )
        return self._row_to_contractor(row) if row is not None else None

    def list_all(self) -> list[Contractor]:
        rows = self.conn.execute(text("SELECT * FROM contractors ORDER BY contractor_name")).mappings().fetchall()
        return [self._row_to_contractor(row) for row in rows]

    def update(self, contractor: Contractor) -> Contractor:
        if contractor.id is None:
            raise ValueError("Cannot update contractor without an id")
        self.conn.execute(
            text(
                "UPDATE contractors SET contractor_name = :contractor_name, project = :project, "
                "trade = :trade, date = :date, unit = :unit, unit_price = :unit_price, "
                "estimated_qty = :estimated_qty, estimated_amount = :estimated_amount, "
                "mobile = :mobile, email = :email, address = :address, updated_at = :updated_at "
                "WHERE id = :id"
            ),
            {**self._params(contractor), "updated_at": _now(), "id": contractor.id},
        )
        self.conn.commit()
        result = self._get_by_id(contractor.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve contractor after update (id={contractor.id})")
        return result

    def delete(self, contractor_id: int) -> None:
        self.conn.execute(text("DELETE FROM contractors WHERE id = :id"), {"id": contractor_id})
        self.conn.commit()


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, user: User) -> User:
        self.conn.execute(
            text(
                "INSERT INTO users (principal, name, email, mobile, paygo_id, role, is_active, created_at) "
                "VALUES (:principal, :name, :email, :mobile, :paygo_id, :role, :is_active, :created_at)"
            ),
            {
                "principal": user.principal,
                "name": user.name,
                "email": user.email,
                "mobile": user.mobile,
                "paygo_id": user.paygo_id,
                "role": user.role.value,
                "is_active": user.is_active,
                "created_at": _now(),
            },
        )
        self.conn.commit()
        result = self.get_by_principal(user.principal)
        if result is None:
            raise RuntimeError(f"Failed to retrieve user after create (principal={user.principal})")
        return result

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            principal=row["principal"],
            name=row["name"],
            email=row["email"],
            mobile=row["mobile"],
            paygo_id=row["paygo_id"],
            role=Role(row["role"]),
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
        )

    def get_by_principal(self, principal: str) -> User | None:
        row = (
            self.conn.execute(text("SELECT * FROM users WHERE principal = :principal"), {"principal": principal})
            .mappings()
            .fetchone()
        )
        return self._row_to_user(row) if row is not None else None

    def list_all(self) -> list[User]:
        rows = self.conn.execute(text("SELECT * FROM users ORDER BY name, principal")).mappings().fetchall()
        return [self._row_to_user(row) for row in rows]

    def count(self) -> int:
        return self.conn.execute(text("SELECT COUNT(*) FROM users")).scalar_one()

    def update(self, user: User) -> User:
        self.conn.execute(
            text(
                "UPDATE users SET name = :name, email = :email, mobile = :mobile, paygo_id = :paygo_id, "
                "role = :role, is_active = :is_active WHERE principal = :principal"
            ),
            {
                "name": user.name,
                "email": user.email,
                "mobile": user.mobile,
                "paygo_id": user.paygo_id,
                "role": user.role.value,
                "is_active": user.is_active,
                "principal": user.principal,
            },
        )
        self.conn.commit()
        result = self.get_by_principal(user.principal)
        if result is None:
            raise RuntimeError(f"Failed to retrieve user after update (principal={user.principal})")
        return result

    def delete(self, user_id: int) -> None:
        self.conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user_id})
        self.conn.commit()
