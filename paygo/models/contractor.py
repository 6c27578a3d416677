from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class Contractor(BaseModel):
    id: int | None = None
    uuid: str = ""
    contractor_name: str
    project: str = ""
    trade: str = ""
    date: str = ""
    unit: str = ""
    unit_price: Decimal = Decimal("0")
    estimated_qty: Decimal = Decimal("0")
    estimated_amount: Decimal = Decimal("0")
    mobile: str = ""
    email: str = ""
    address: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
