from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    COMPLETED = "Completed"


class Payment(BaseModel):
    id: int | None = None
    uuid: str = ""
    payment_id: str = ""
    bill_number: str
    payment_date: str = ""  # 'YYYY-MM-DD'
    paid_amount: Decimal
    project: str = ""
    contractor: str = ""
    bill_total: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")  # snapshot at the time this payment was recorded
    status: PaymentStatus = PaymentStatus.PENDING
    created_by: str = ""
    created_at: datetime | None = None
