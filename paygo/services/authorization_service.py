from __future__ import annotations

import logging

from paygo.exceptions import Forbidden
from paygo.models.roles import Actor, Role

logger = logging.getLogger(__name__)

RAISE_ROLES = frozenset({Role.ADMIN, Role.SITE_ENGINEER})
PM_ROLES = frozenset({Role.ADMIN, Role.PROJECT_MANAGER})
QC_ROLES = frozenset({Role.ADMIN, Role.QC})
BILLING_ROLES = frozenset({Role.ADMIN, Role.BILLING_ENGINEER})
PAYMENT_ROLES = BILLING_ROLES


class AuthorizationService:
    def can_raise(self, actor: Actor) -> bool:
        result = actor.role in RAISE_ROLES
        logger.debug("actor=%s role=%s can_raise=%s", actor.principal, actor.role.value, result)
        return result

    def can_approve_pm(self, actor: Actor) -> bool:
        result = actor.role in PM_ROLES
        logger.debug("actor=%s role=%s can_approve_pm=%s", actor.principal, actor.role.value, result)
        return result

    def can_approve_qc(self, actor: Actor) -> bool:
        result = actor.role in QC_ROLES
        logger.debug("actor=%s role=%s can_approve_qc=%s", actor.principal, actor.role.value, result)
        return result

    def can_approve_billing(self, actor: Actor) -> bool:
        result = actor.role in BILLING_ROLES
        logger.debug("actor=%s role=%s can_approve_billing=%s", actor.principal, actor.role.value, result)
        return result

    def can_record_payment(self, actor: Actor) -> bool:
        result = actor.role in PAYMENT_ROLES
        logger.debug("actor=%s role=%s can_record_payment=%s", actor.principal, actor.role.value, result)
        return result

    def can_delete(self, actor: Actor) -> bool:
        return actor.role == Role.ADMIN

    def can_manage_users(self, actor: Actor) -> bool:
        return actor.role == Role.ADMIN

    def can_edit_master_data(self, actor: Actor) -> bool:
        result = actor.role != Role.VIEWER
        logger.debug("actor=%s role=%s can_edit_master_data=%s", actor.principal, actor.role.value, result)
        return result

    @staticmethod
    def require(allowed: bool, actor: Actor, action: str) -> None:
        if not allowed:
            logger.warning("Forbidden: actor=%s role=%s action=%s", actor.principal, actor.role.value, action)
            raise Forbidden(f"Role '{actor.role.value}' may not {action}")
