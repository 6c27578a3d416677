import questionary
from rich.console import Console

from paygo.cli.approval_menu import approval_queue_menu, show_units
from paygo.cli.ledger_menu import list_payments_menu, record_payment_menu
from paygo.cli.user_menu import user_management_menu
from paygo.exceptions import PayGoError
from paygo.models.roles import ROLE_LABELS, Actor
from paygo.repositories.factory import (
    get_bill_repository,
    get_contractor_repository,
    get_payment_repository,
    get_project_repository,
    get_user_repository,
    get_weekly_record_repository,
)
from paygo.services.bill_service import BillService
from paygo.services.master_data import MasterDataService
from paygo.services.nmr_service import NMRService
from paygo.services.payment_service import PaymentService
from paygo.services.user_service import UserService

console = Console()


def _build_services() -> tuple[BillService, NMRService, PaymentService, UserService]:
    bill_repo = get_bill_repository()
    payment_repo = get_payment_repository()
    master_data = MasterDataService(get_project_repository(), get_contractor_repository())
    return (
        BillService(bill_repo, payment_repo, master_data=master_data),
        NMRService(get_weekly_record_repository(), master_data=master_data),
        PaymentService(payment_repo, bill_repo),
        UserService(get_user_repository()),
    )


def _sign_in(user_service: UserService) -> Actor | None:
    principal = questionary.text("Principal (login id):").ask()
    if not principal:
        return None
    user = user_service.login(principal)
    try:
        return user_service.resolve_actor(user.principal)
    except PayGoError as e:
        console.print(f"[red]{e}[/red]")
        return None


def main_menu() -> None:
    bill_service, nmr_service, payment_service, user_service = _build_services()

    console.print()
    console.print("[bold]PayGo Billing[/bold]", style="cyan")
    console.print()

    actor = _sign_in(user_service)
    if actor is None:
        console.print("[bold]Bye![/bold]")
        return
    console.print(f"Signed in as [bold]{actor.principal}[/bold] ({ROLE_LABELS[actor.role]})")

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Bills",
                "List Weekly Records",
                "List Payments",
                "Approval Queue",
                "Record Payment",
                "Manage Users",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "List Bills":
            show_units("Bills", bill_service.list_bills())
        elif choice == "List Weekly Records":
            show_units("Weekly Records", nmr_service.list_records())
        elif choice == "List Payments":
            list_payments_menu(payment_service)
        elif choice == "Approval Queue":
            approval_queue_menu(bill_service, nmr_service, actor)
        elif choice == "Record Payment":
            record_payment_menu(payment_service, actor)
        elif choice == "Manage Users":
            if not user_service.authz.can_manage_users(actor):
                console.print("[red]Only admins can manage users.[/red]")
                continue
            user_management_menu(user_service, actor)
