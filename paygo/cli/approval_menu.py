from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from paygo.constants import STATUS_STYLES
from paygo.exceptions import PayGoError
from paygo.models import format_inr, parse_amount
from paygo.models.approval import ApprovalStatus, PayableUnit
from paygo.models.roles import Actor
from paygo.services.authorization_service import AuthorizationService
from paygo.services.bill_service import BillService
from paygo.services.nmr_service import NMRService
from paygo.settings import settings

console = Console()

STAGE_QUEUES = {
    "PM": ApprovalStatus.PENDING_PM,
    "QC": ApprovalStatus.PENDING_QC,
    "Billing": ApprovalStatus.PENDING_BILLING,
}


def _money(amount) -> str:
    return format_inr(amount, settings.currency_symbol)


def allowed_stages(actor: Actor, authz: AuthorizationService | None = None) -> list[str]:
    authz = authz or AuthorizationService()
    stages = []
    if authz.can_approve_pm(actor):
        stages.append("PM")
    if authz.can_approve_qc(actor):
        stages.append("QC")
    if authz.can_approve_billing(actor):
        stages.append("Billing")
    return stages


def show_units(title: str, units: list[PayableUnit]) -> None:
    if not units:
        console.print("[yellow]Nothing to show.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("Number", style="bold")
    table.add_column("Project")
    table.add_column("Contractor")
    table.add_column("Base", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Status")

    for unit in units:
        style = STATUS_STYLES.get(unit.status, "")
        table.add_row(
            unit.display_number,
            unit.project,
            unit.contractor,
            _money(unit.base_amount),
            _money(unit.final_amount),
            f"[{style}]{unit.status.value}[/{style}]" if style else unit.status.value,
        )

    console.print()
    console.print(table)
    console.print()


def _ask_debit() -> str | None:
    while True:
        val = questionary.text("Debit (ex: 250.00, blank for none):").ask()
        if val is None:
            return None
        if not val.strip():
            return "0"
        parsed = parse_amount(val)
        if parsed is not None and parsed >= 0:
            return str(parsed)
        console.print("[red]Invalid amount. Try again.[/red]")


def _decide(service: BillService | NMRService, stage: str, unit: PayableUnit, actor: Actor) -> None:
    decision = questionary.select(
        f"{unit.display_number}: {_money(unit.final_amount)}",
        choices=["Approve", "Reject", "Back"],
    ).ask()
    if decision is None or decision == "Back":
        return
    approved = decision == "Approve"

    debit = "0"
    if stage in ("PM", "QC"):
        asked = _ask_debit()
        if asked is None:
            return
        debit = asked
    note = questionary.text("Note (optional):").ask() or ""

    try:
        if stage == "PM":
            updated = service.approve_pm(unit.uuid, approved, debit, note, actor=actor)
        elif stage == "QC":
            updated = service.approve_qc(unit.uuid, approved, debit, note, actor=actor)
        else:
            updated = service.approve_billing(unit.uuid, approved, None, note, actor=actor)
    except PayGoError as e:
        console.print(f"[red]{e}[/red]")
        return
    console.print(
        f"[green bold]{updated.display_number}: {updated.status.value}, "
        f"final {_money(updated.final_amount)}[/green bold]"
    )


def approval_queue_menu(bill_service: BillService, nmr_service: NMRService, actor: Actor) -> None:
    stages = allowed_stages(actor, bill_service.authz)
    if not stages:
        console.print("[yellow]Your role cannot approve anything.[/yellow]")
        return

    while True:
        stage = questionary.select("Approval queue", choices=stages + ["Back"]).ask()
        if stage is None or stage == "Back":
            break
        kind = questionary.select("Queue", choices=["Bills", "Weekly Records", "Back"]).ask()
        if kind is None or kind == "Back":
            continue

        service = bill_service if kind == "Bills" else nmr_service
        status = STAGE_QUEUES[stage]
        if kind == "Bills":
            units = bill_service.list_bills(status)
        else:
            units = nmr_service.list_records(status)
        show_units(f"{kind} pending {stage}", units)
        if not units:
            continue

        by_number = {u.display_number: u for u in units}
        number = questionary.select("Select:", choices=list(by_number) + ["Back"]).ask()
        if number is None or number == "Back":
            continue
        _decide(service, stage, by_number[number], actor)
