from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from paygo.exceptions import PayGoError
from paygo.models.roles import ROLE_LABELS, Actor, Role
from paygo.services.user_service import UserService

console = Console()


def _role_choices() -> list[questionary.Choice]:
    return [questionary.Choice(ROLE_LABELS[role], value=role) for role in Role]


def user_management_menu(user_service: UserService, actor: Actor) -> None:
    while True:
        choice = questionary.select(
            "Manage Users",
            choices=[
                "Create User",
                "Change Role",
                "Activate / Deactivate",
                "List Users",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Create User":
            _create_user(user_service, actor)
        elif choice == "Change Role":
            _change_role(user_service, actor)
        elif choice == "Activate / Deactivate":
            _toggle_active(user_service, actor)
        elif choice == "List Users":
            _list_users(user_service)


def _create_user(user_service: UserService, actor: Actor) -> None:
    console.print()
    console.print("[bold]New User[/bold]", style="cyan")

    principal = questionary.text("Principal (login id):").ask()
    if not principal:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    name = questionary.text("Name:").ask() or ""
    email = questionary.text("Email:").ask() or ""
    mobile = questionary.text("Mobile (optional):").ask() or ""
    role = questionary.select("Role:", choices=_role_choices()).ask()
    if role is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    try:
        user = user_service.create_user(principal, name, email, mobile, role, actor=actor)
        console.print(f"[green bold]User '{user.principal}' created as {ROLE_LABELS[user.role]}.[/green bold]")
    except (PayGoError, ValueError) as e:
        console.print(f"[red]Could not create user: {e}[/red]")


def _pick_user(user_service: UserService, title: str) -> str | None:
    users = user_service.list_users()
    if not users:
        console.print("[yellow]No users yet.[/yellow]")
        return None
    choices = [u.principal for u in users] + ["Back"]
    principal = questionary.select(title, choices=choices).ask()
    if principal is None or principal == "Back":
        return None
    return principal


def _change_role(user_service: UserService, actor: Actor) -> None:
    principal = _pick_user(user_service, "Select user:")
    if principal is None:
        return
    role = questionary.select("New role:", choices=_role_choices()).ask()
    if role is None:
        return
    try:
        user = user_service.update_role(principal, role, actor=actor)
        console.print(f"[green bold]'{principal}' is now {ROLE_LABELS[user.role]}.[/green bold]")
    except PayGoError as e:
        console.print(f"[red]{e}[/red]")


def _toggle_active(user_service: UserService, actor: Actor) -> None:
    principal = _pick_user(user_service, "Select user:")
    if principal is None:
        return
    user = user_service.get_user(principal)
    if user is None:
        return
    try:
        updated = user_service.update_user(principal, actor=actor, is_active=not user.is_active)
        state = "active" if updated.is_active else "inactive"
        console.print(f"[green bold]'{principal}' is now {state}.[/green bold]")
    except PayGoError as e:
        console.print(f"[red]{e}[/red]")


def _list_users(user_service: UserService) -> None:
    users = user_service.list_users()

    if not users:
        console.print("[yellow]No users yet.[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("Principal", style="bold")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    table.add_column("Active", justify="center")
    table.add_column("Created")

    for u in users:
        created = u.created_at.strftime("%d/%m/%Y %H:%M") if u.created_at else "-"
        table.add_row(
            u.principal,
            u.name,
            u.email,
            ROLE_LABELS[u.role],
            "yes" if u.is_active else "no",
            created,
        )

    console.print()
    console.print(table)
    console.print()
