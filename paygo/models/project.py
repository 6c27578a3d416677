from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class Project(BaseModel):
    id: int | None = None
    uuid: str = ""
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
    created_at: datetime | None = None
    updated_at: datetime | None = None
