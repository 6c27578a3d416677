from __future__ import annotations

import logging

from paygo.exceptions import NotFound
from paygo.models.contractor import Contractor
from paygo.models.roles import Actor
from paygo.repositories.base import ContractorRepository
from paygo.services.amounts import compute_contractor_estimate, require_amount
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard

logger = logging.getLogger(__name__)


class ContractorService:
    def __init__(
        self,
        repo: ContractorRepository,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
    ) -> None:
        self.repo = repo
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)

    @staticmethod
    def _prepare(contractor: Contractor) -> Contractor:
        if not contractor.contractor_name.strip():
            raise ValueError("Contractor name is required")
        contractor.unit_price = require_amount("unit_price", contractor.unit_price)
        contractor.estimated_qty = require_amount("estimated_qty", contractor.estimated_qty)
        contractor.estimated_amount = compute_contractor_estimate(contractor.unit_price, contractor.estimated_qty)
        return contractor

    def create_contractor(self, contractor: Contractor, *, actor: Actor) -> Contractor:
        self.authz.require(self.authz.can_edit_master_data(actor), actor, "create contractors")
        created = self.repo.create(self._prepare(contractor))
        logger.info(
            "Contractor created: uuid=%s name=%s estimate=%s by=%s",
            created.uuid,
            created.contractor_name,
            created.estimated_amount,
            actor.principal,
        )
        return created

    def get_contractor(self, uuid: str) -> Contractor | None:
        result = self.repo.get_by_uuid(uuid)
        logger.debug("get_contractor uuid=%s found=%s", uuid, result is not None)
        return result

    def list_contractors(self) -> list[Contractor]:
        result = self.repo.list_all()
        logger.debug("Listed %d contractors", len(result))
        return result

    def update_contractor(self, contractor: Contractor, *, actor: Actor) -> Contractor:
        self.authz.require(self.authz.can_edit_master_data(actor), actor, "edit contractors")
        result = self.repo.update(self._prepare(contractor))
        logger.info("Contractor updated: uuid=%s name=%s", result.uuid, result.contractor_name)
        return result

    def delete_contractor(self, uuid: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete contractors")
        contractor = self.repo.get_by_uuid(uuid)
        if contractor is None or contractor.id is None:
            logger.warning("Delete failed: contractor %s not found", uuid)
            raise NotFound(f"contractor {uuid} not found")
        self.repo.delete(contractor.id)
        logger.info("Contractor %s deleted by %s", contractor.contractor_name, actor.principal)
