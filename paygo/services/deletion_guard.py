from __future__ import annotations

import hmac
import logging

from paygo.exceptions import Unauthorized
from paygo.models.roles import Actor
from paygo.services.authorization_service import AuthorizationService
from paygo.settings import settings

logger = logging.getLogger(__name__)


class DeletionGuard:
    """Role check plus shared-secret confirmation for every destructive operation.

    Order: role, then secret, then (in the caller) the target lookup.
    """

    def __init__(self, secret: str | None = None, authz: AuthorizationService | None = None) -> None:
        self._secret = secret
        self.authz = authz or AuthorizationService()

    def _expected_secret(self) -> str:
        if self._secret is not None:
            return self._secret
        return settings.get_delete_password()

    def check(self, actor: Actor, password: str, action: str = "delete records") -> None:
        self.authz.require(self.authz.can_delete(actor), actor, action)
        expected = self._expected_secret()
        if not expected or not hmac.compare_digest(password.encode(), expected.encode()):
            logger.warning("Deletion refused: bad secret from actor=%s action=%s", actor.principal, action)
            raise Unauthorized("Invalid deletion password")
        logger.debug("Deletion authorized: actor=%s action=%s", actor.principal, action)
