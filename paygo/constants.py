from zoneinfo import ZoneInfo

from paygo.models.approval import ApprovalStatus

IST_TZ = ZoneInfo("Asia/Kolkata")

UNITS = (
    "Rft",
    "Sft",
    "Cuft",
    "Rmt",
    "Smt",
    "Cumt",
    "Pcs",
    "Nos",
    "Bundles",
    "Ltr",
    "Kg",
    "Ton",
    "Lumsum",
)

PROJECT_STATUSES = ("Active", "On Hold", "Completed")

STATUS_STYLES = {
    ApprovalStatus.PENDING_PM: "yellow",
    ApprovalStatus.PENDING_QC: "yellow",
    ApprovalStatus.PENDING_BILLING: "yellow",
    ApprovalStatus.APPROVED: "green",
    ApprovalStatus.REJECTED: "red",
}


def format_date(value: str) -> str:
    """'2025-03-07' -> '07 Mar 2025'; anything unparsable is returned unchanged."""
    from datetime import date

    try:
        return date.fromisoformat(value).strftime("%d %b %Y")
    except (TypeError, ValueError):
        return value or ""
