from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from paygo.constants import format_date
from paygo.exceptions import PayGoError
from paygo.models import format_inr, parse_amount
from paygo.models.approval import ApprovalStatus
from paygo.models.roles import Actor
from paygo.services.payment_service import PaymentService
from paygo.settings import settings

console = Console()


def _money(amount) -> str:
    return format_inr(amount, settings.currency_symbol)


def list_payments_menu(payment_service: PaymentService) -> None:
    payments = payment_service.list_payments()
    if not payments:
        console.print("[yellow]No payments recorded.[/yellow]")
        return

    table = Table(title="Payments")
    table.add_column("Payment", style="bold")
    table.add_column("Bill")
    table.add_column("Date")
    table.add_column("Paid", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Status")

    for p in payments:
        table.add_row(
            p.payment_id,
            p.bill_number,
            format_date(p.payment_date),
            _money(p.paid_amount),
            _money(p.balance),
            p.status.value,
        )

    console.print()
    console.print(table)
    console.print()


def record_payment_menu(payment_service: PaymentService, actor: Actor) -> None:
    console.print()
    console.print("[bold]Record Payment[/bold]", style="cyan")

    approved = [b for b in payment_service.bill_repo.list_all() if b.status == ApprovalStatus.APPROVED]
    if not approved:
        console.print("[yellow]No approved bills.[/yellow]")
        return

    choices = [
        questionary.Choice(
            f"{b.bill_number}  {b.contractor}  balance {_money(payment_service.get_balance(b.bill_number))}",
            value=b.bill_number,
        )
        for b in sorted(approved, key=lambda b: b.bill_number, reverse=True)
    ]
    bill_number = questionary.select("Bill:", choices=choices + [questionary.Choice("Back", value=None)]).ask()
    if bill_number is None:
        return

    while True:
        val = questionary.text("Amount paid (ex: 600.00):").ask()
        if val is None:
            return
        amount = parse_amount(val)
        if amount is not None and amount > 0:
            break
        console.print("[red]Invalid amount. Try again.[/red]")

    payment_date = questionary.text("Payment date (YYYY-MM-DD, blank for today):").ask() or ""

    try:
        payment = payment_service.create_payment(bill_number, payment_date, amount, actor=actor)
    except PayGoError as e:
        console.print(f"[red]{e}[/red]")
        return
    console.print(
        f"[green bold]{payment.payment_id} recorded: balance {_money(payment.balance)} "
        f"({payment.status.value})[/green bold]"
    )
