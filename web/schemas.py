"""Request bodies accepted by the JSON API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from paygo.models.roles import Role


class BillCreate(BaseModel):
    contractor: str
    project: str
    project_date: str = ""
    trade: str = ""
    unit: str = ""
    unit_price: Decimal
    quantity: Decimal
    description: str = ""
    location: str = ""


class EntryBody(BaseModel):
    date: str = ""
    labour_type: str = ""
    persons: Decimal
    rate: Decimal
    hours: Decimal
    duty: str = ""


class WeeklyRecordCreate(BaseModel):
    project: str
    contractor: str
    week_start: str = ""
    week_end: str = ""
    trade: str = ""
    engineer_name: str = ""
    entries: list[EntryBody] = []


class StageDecisionBody(BaseModel):
    approved: bool
    debit: Decimal = Decimal("0")
    note: str = ""


class BillingDecisionBody(BaseModel):
    approved: bool
    final_amount: Decimal | None = None
    note: str = ""


class PaymentCreate(BaseModel):
    bill_number: str
    payment_date: str = ""
    paid_amount: Decimal


class DeleteBody(BaseModel):
    password: str = ""


class ProjectBody(BaseModel):
    project_name: str
    client_name: str = ""
    start_date: str = ""
    estimated_budget: Decimal = Decimal("0")
    site_address: str = ""
    office_address: str = ""
    contact_number: str = ""
    location_link1: str = ""
    location_link2: str = ""
    note: str = ""
    status: str = "Active"


class ContractorBody(BaseModel):
    contractor_name: str
    project: str = ""
    trade: str = ""
    date: str = ""
    unit: str = ""
    unit_price: Decimal = Decimal("0")
    estimated_qty: Decimal = Decimal("0")
    mobile: str = ""
    email: str = ""
    address: str = ""


class LoginBody(BaseModel):
    name: str = ""
    email: str = ""


class UserCreate(BaseModel):
    principal: str = Field(min_length=1)
    name: str = ""
    email: str = ""
    mobile: str = ""
    paygo_id: str = ""
    role: Role = Role.VIEWER


class UserUpdate(BaseModel):
    role: Role | None = None
    is_active: bool | None = None
    name: str | None = None
    email: str | None = None
    mobile: str | None = None
    paygo_id: str | None = None
