from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    SITE_ENGINEER = "siteEngineer"
    PROJECT_MANAGER = "projectManager"
    QC = "qc"
    BILLING_ENGINEER = "billingEngineer"
    VIEWER = "viewer"


ROLE_LABELS = {
    Role.ADMIN: "Admin",
    Role.SITE_ENGINEER: "Site Engineer",
    Role.PROJECT_MANAGER: "Project Manager",
    Role.QC: "QC",
    Role.BILLING_ENGINEER: "Billing Engineer",
    Role.VIEWER: "Viewer",
}


class Actor(BaseModel):
    """The resolved caller of a service operation."""

    principal: str
    role: Role
