from __future__ import annotations

from decimal import Decimal

from paygo.models.approval import PayableUnit


class Bill(PayableUnit):
    project_date: str = ""  # 'YYYY-MM-DD'
    unit: str = ""
    unit_price: Decimal = Decimal("0")
    quantity: Decimal = Decimal("0")
    description: str = ""
    location: str = ""
    authorized_engineer: str = ""

    @property
    def bill_number(self) -> str:
        return self.display_number
