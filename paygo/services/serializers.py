"""Serializers that convert models to JSON-ready dicts for the HTTP API.

Money is rendered as a fixed two-decimal string so no client ever parses a
float. Status is materialized from the stage decisions here and nowhere else.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from paygo.models.approval import ApprovalStage, PayableUnit
from paygo.models.bill import Bill
from paygo.models.contractor import Contractor
from paygo.models.nmr import WeeklyRecord
from paygo.models.payment import Payment
from paygo.models.project import Project
from paygo.models.user import User
from paygo.services.dashboard_service import DashboardSummary


def _dt(val: datetime | None) -> str | None:
    """Convert datetime to ISO string, or None."""
    if val is None:
        return None
    return val.isoformat()


def _money(val: Decimal) -> str:
    return f"{val:.2f}"


def _stage(stage: ApprovalStage, with_debit: bool = True) -> dict:
    data = {"decision": stage.decision.value, "approved": stage.approved, "note": stage.note}
    if with_debit:
        data["debit"] = _money(stage.debit)
    return data


def _unit(unit: PayableUnit) -> dict:
    return {
        "uuid": unit.uuid,
        "number": unit.display_number,
        "project": unit.project,
        "contractor": unit.contractor,
        "trade": unit.trade,
        "base_amount": _money(unit.base_amount),
        "final_amount": _money(unit.final_amount),
        "status": unit.status.value,
        "pm": _stage(unit.pm),
        "qc": _stage(unit.qc),
        "billing": _stage(unit.billing, with_debit=False),
        "created_by": unit.created_by,
        "created_at": _dt(unit.created_at),
        "updated_at": _dt(unit.updated_at),
    }


def serialize_bill(bill: Bill) -> dict:
    return {
        **_unit(bill),
        "project_date": bill.project_date,
        "unit": bill.unit,
        "unit_price": str(bill.unit_price),
        "quantity": str(bill.quantity),
        "description": bill.description,
        "location": bill.location,
        "authorized_engineer": bill.authorized_engineer,
    }


def serialize_weekly_record(record: WeeklyRecord) -> dict:
    return {
        **_unit(record),
        "week_start": record.week_start,
        "week_end": record.week_end,
        "engineer_name": record.engineer_name,
        "entries": [
            {
                "date": entry.date,
                "labour_type": entry.labour_type,
                "persons": str(entry.persons),
                "rate": str(entry.rate),
                "hours": str(entry.hours),
                "duty": entry.duty,
                "amount": _money(entry.amount),
            }
            for entry in record.entries
        ],
    }


def serialize_payment(payment: Payment) -> dict:
    return {
        "uuid": payment.uuid,
        "payment_id": payment.payment_id,
        "bill_number": payment.bill_number,
        "payment_date": payment.payment_date,
        "paid_amount": _money(payment.paid_amount),
        "project": payment.project,
        "contractor": payment.contractor,
        "bill_total": _money(payment.bill_total),
        "balance": _money(payment.balance),
        "status": payment.status.value,
        "created_by": payment.created_by,
        "created_at": _dt(payment.created_at),
    }


def serialize_project(project: Project) -> dict:
    return {
        "uuid": project.uuid,
        "project_name": project.project_name,
        "client_name": project.client_name,
        "start_date": project.start_date,
        "estimated_budget": _money(project.estimated_budget),
        "site_address": project.site_address,
        "office_address": project.office_address,
        "contact_number": project.contact_number,
        "location_link1": project.location_link1,
        "location_link2": project.location_link2,
        "note": project.note,
        "status": project.status,
        "created_at": _dt(project.created_at),
        "updated_at": _dt(project.updated_at),
    }


def serialize_contractor(contractor: Contractor) -> dict:
    return {
        "uuid": contractor.uuid,
        "contractor_name": contractor.contractor_name,
        "project": contractor.project,
        "trade": contractor.trade,
        "date": contractor.date,
        "unit": contractor.unit,
        "unit_price": str(contractor.unit_price),
        "estimated_qty": str(contractor.estimated_qty),
        "estimated_amount": _money(contractor.estimated_amount),
        "mobile": contractor.mobile,
        "email": contractor.email,
        "address": contractor.address,
        "created_at": _dt(contractor.created_at),
        "updated_at": _dt(contractor.updated_at),
    }


def serialize_user(user: User) -> dict:
    return {
        "principal": user.principal,
        "name": user.name,
        "email": user.email,
        "mobile": user.mobile,
        "paygo_id": user.paygo_id,
        "role": user.role.value,
        "is_active": user.is_active,
        "created_at": _dt(user.created_at),
    }


def serialize_dashboard(summary: DashboardSummary) -> dict:
    return {
        "total_bills": summary.total_bills,
        "bills_by_status": summary.bills_by_status,
        "total_nmrs": summary.total_nmrs,
        "nmrs_by_status": summary.nmrs_by_status,
        "total_payments": summary.total_payments,
        "approved_value": _money(summary.approved_value),
        "total_paid": _money(summary.total_paid),
        "outstanding": _money(summary.outstanding),
        "bills_by_settlement": summary.bills_by_settlement,
    }
