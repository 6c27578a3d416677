from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from paygo.models.roles import Role


class User(BaseModel):
    id: int | None = None
    principal: str
    name: str = ""
    email: str = ""
    mobile: str = ""
    paygo_id: str = ""
    role: Role = Role.VIEWER
    is_active: bool = True
    created_at: datetime | None = None
