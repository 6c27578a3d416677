from __future__ import annotations

import logging

from paygo.exceptions import Forbidden, NotFound, Unauthorized
from paygo.models.roles import Actor, Role
from paygo.models.user import User
from paygo.repositories.base import UserRepository
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard
from paygo.settings import settings

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
        main_admin_email: str | None = None,
    ) -> None:
        self.repo = repo
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)
        self._main_admin_email = main_admin_email

    @property
    def main_admin_email(self) -> str:
        if self._main_admin_email is None:
            return settings.main_admin_email
        return self._main_admin_email

    def is_main_admin(self, user: User) -> bool:
        expected = self.main_admin_email.strip().lower()
        return bool(expected) and user.email.strip().lower() == expected

    def login(self, principal: str, name: str = "", email: str = "") -> User:
        """Return the user for ``principal``, registering it on first sight.

        New users are viewers, except the main admin and the very first user,
        who become admins.
        """
        if not principal:
            raise Unauthorized("A principal is required")
        existing = self.repo.get_by_principal(principal)
        if existing is not None:
            logger.debug("login principal=%s existing user", principal)
            return existing
        candidate = User(principal=principal, name=name, email=email)
        if self.is_main_admin(candidate) or self.repo.count() == 0:
            candidate.role = Role.ADMIN
        user = self.repo.create(candidate)
        logger.info("User registered on first login: principal=%s role=%s", principal, user.role.value)
        return user

    def resolve_actor(self, principal: str | None) -> Actor:
        if not principal:
            logger.warning("Identity failed: no principal supplied")
            raise Unauthorized("Caller is not identified")
        user = self.repo.get_by_principal(principal)
        if user is None:
            logger.warning("Identity failed: unknown principal %s", principal)
            raise Unauthorized(f"Unknown principal {principal}")
        if not user.is_active:
            logger.warning("Identity failed: principal %s is inactive", principal)
            raise Forbidden(f"User {principal} is inactive")
        return Actor(principal=user.principal, role=user.role)

    def create_user(
        self,
        principal: str,
        name: str = "",
        email: str = "",
        mobile: str = "",
        role: Role = Role.VIEWER,
        paygo_id: str = "",
        *,
        actor: Actor,
    ) -> User:
        self.authz.require(self.authz.can_manage_users(actor), actor, "manage users")
        if not principal.strip():
            raise ValueError("Principal is required")
        if self.repo.get_by_principal(principal) is not None:
            raise ValueError(f"User '{principal}' already exists")
        user = User(principal=principal, name=name, email=email, mobile=mobile, role=role, paygo_id=paygo_id)
        result = self.repo.create(user)
        logger.info("User created: principal=%s role=%s by=%s", principal, role.value, actor.principal)
        return result

    def get_user(self, principal: str) -> User | None:
        result = self.repo.get_by_principal(principal)
        logger.debug("get_user principal=%s found=%s", principal, result is not None)
        return result

    def list_users(self) -> list[User]:
        return self.repo.list_all()

    def _require_user(self, principal: str) -> User:
        user = self.repo.get_by_principal(principal)
        if user is None:
            logger.warning("User lookup failed: %s not found", principal)
            raise NotFound(f"user {principal} not found")
        return user

    def update_user(
        self,
        principal: str,
        *,
        actor: Actor,
        role: Role | None = None,
        is_active: bool | None = None,
        name: str | None = None,
        email: str | None = None,
        mobile: str | None = None,
        paygo_id: str | None = None,
    ) -> User:
        self.authz.require(self.authz.can_manage_users(actor), actor, "manage users")
        user = self._require_user(principal)
        if self.is_main_admin(user) and ((role is not None and role != Role.ADMIN) or is_active is False):
            logger.warning("Update refused: %s is the main admin", principal)
            raise Forbidden("The main admin cannot be demoted or deactivated")
        if role is not None:
            user.role = role
        if is_active is not None:
            user.is_active = is_active
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if mobile is not None:
            user.mobile = mobile
        if paygo_id is not None:
            user.paygo_id = paygo_id
        result = self.repo.update(user)
        logger.info(
            "User updated: principal=%s role=%s active=%s by=%s",
            principal,
            result.role.value,
            result.is_active,
            actor.principal,
        )
        return result

    def update_role(self, principal: str, role: Role, *, actor: Actor) -> User:
        return self.update_user(principal, actor=actor, role=role)

    def delete_user(self, principal: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete users")
        user = self._require_user(principal)
        if self.is_main_admin(user):
            logger.warning("Delete refused: %s is the main admin", principal)
            raise Forbidden("The main admin cannot be deleted")
        if user.id is None:
            raise ValueError("Cannot delete user without an id")
        self.repo.delete(user.id)
        logger.info("User %s deleted by %s", principal, actor.principal)
