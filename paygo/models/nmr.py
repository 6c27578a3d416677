from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from paygo.models.approval import PayableUnit


class NMREntry(BaseModel):
    id: int | None = None
    record_id: int | None = None
    date: str = ""  # 'YYYY-MM-DD'
    labour_type: str = ""
    persons: Decimal
    rate: Decimal  # rupees per person-hour
    hours: Decimal
    duty: str = ""
    amount: Decimal = Decimal("0")
    sort_order: int = 0


class WeeklyRecord(PayableUnit):
    week_start: str = ""
    week_end: str = ""
    engineer_name: str = ""
    entries: list[NMREntry] = []

    @property
    def nmr_number(self) -> str:
        return self.display_number
