from __future__ import annotations

import logging

from paygo.constants import PROJECT_STATUSES
from paygo.exceptions import NotFound
from paygo.models.project import Project
from paygo.models.roles import Actor
from paygo.repositories.base import ProjectRepository
from paygo.services.amounts import require_amount
from paygo.services.authorization_service import AuthorizationService
from paygo.services.deletion_guard import DeletionGuard

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(
        self,
        repo: ProjectRepository,
        guard: DeletionGuard | None = None,
        authz: AuthorizationService | None = None,
    ) -> None:
        self.repo = repo
        self.authz = authz or AuthorizationService()
        self.guard = guard or DeletionGuard(authz=self.authz)

    @staticmethod
    def _validate(project: Project) -> Project:
        if not project.project_name.strip():
            raise ValueError("Project name is required")
        if project.status not in PROJECT_STATUSES:
            raise ValueError(f"Unknown project status '{project.status}'")
        project.estimated_budget = require_amount("estimated_budget", project.estimated_budget)
        return project

    def create_project(self, project: Project, *, actor: Actor) -> Project:
        self.authz.require(self.authz.can_edit_master_data(actor), actor, "create projects")
        created = self.repo.create(self._validate(project))
        logger.info("Project created: uuid=%s name=%s by=%s", created.uuid, created.project_name, actor.principal)
        return created

    def get_project(self, uuid: str) -> Project | None:
        result = self.repo.get_by_uuid(uuid)
        logger.debug("get_project uuid=%s found=%s", uuid, result is not None)
        return result

    def list_projects(self) -> list[Project]:
        result = self.repo.list_all()
        logger.debug("Listed %d projects", len(result))
        return result

    def update_project(self, project: Project, *, actor: Actor) -> Project:
        self.authz.require(self.authz.can_edit_master_data(actor), actor, "edit projects")
        result = self.repo.update(self._validate(project))
        logger.info("Project updated: uuid=%s name=%s", result.uuid, result.project_name)
        return result

    def delete_project(self, uuid: str, password: str, *, actor: Actor) -> None:
        self.guard.check(actor, password, "delete projects")
        project = self.repo.get_by_uuid(uuid)
        if project is None or project.id is None:
            logger.warning("Delete failed: project %s not found", uuid)
            raise NotFound(f"project {uuid} not found")
        self.repo.delete(project.id)
        logger.info("Project %s deleted by %s", project.project_name, actor.principal)
