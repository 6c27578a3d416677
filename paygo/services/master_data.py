from __future__ import annotations

import logging

from paygo.constants import UNITS
from paygo.repositories.base import ContractorRepository, ProjectRepository

logger = logging.getLogger(__name__)


class MasterDataService:
    """Advisory lookups against the project and contractor lists.

    Bills and weekly records keep free-text project and contractor names.
    Unknown names are logged and reported back, never refused.
    """

    def __init__(
        self,
        project_repo: ProjectRepository | None = None,
        contractor_repo: ContractorRepository | None = None,
    ) -> None:
        self.project_repo = project_repo
        self.contractor_repo = contractor_repo

    def project_exists(self, reference: str) -> bool:
        if self.project_repo is None or not reference:
            return True
        return (
            self.project_repo.get_by_uuid(reference) is not None
            or self.project_repo.find_by_name(reference) is not None
        )

    def contractor_exists(self, reference: str) -> bool:
        if self.contractor_repo is None or not reference:
            return True
        return (
            self.contractor_repo.get_by_uuid(reference) is not None
            or self.contractor_repo.find_by_name(reference) is not None
        )

    def check_references(self, project: str, contractor: str, unit: str | None = None) -> list[str]:
        """Return a list of human-readable warnings; empty when everything is known."""
        warnings: list[str] = []
        if not self.project_exists(project):
            warnings.append(f"Unknown project '{project}'")
        if not self.contractor_exists(contractor):
            warnings.append(f"Unknown contractor '{contractor}'")
        if unit and unit not in UNITS:
            warnings.append(f"Unusual unit of measure '{unit}'")
        for message in warnings:
            logger.warning("Master data check: %s", message)
        return warnings
