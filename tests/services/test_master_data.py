from unittest.mock import MagicMock

from paygo.models.contractor import Contractor
from paygo.models.project import Project
from paygo.services.master_data import MasterDataService


class TestMasterDataService:
    def setup_method(self):
        self.projects = MagicMock()
        self.contractors = MagicMock()
        self.projects.get_by_uuid.return_value = None
        self.contractors.get_by_uuid.return_value = None
        self.projects.find_by_name.side_effect = lambda name: Project(project_name=name) if name == "Tower A" else None
        self.contractors.find_by_name.side_effect = (
            lambda name: Contractor(contractor_name=name) if name == "Sharma Constructions" else None
        )
        self.service = MasterDataService(self.projects, self.contractors)

    def test_known_references(self):
        assert self.service.check_references("Tower A", "Sharma Constructions", "Sft") == []

    def test_unknown_references_are_reported_not_refused(self):
        warnings = self.service.check_references("Tower Z", "Nobody", "Furlong")
        assert warnings == [
            "Unknown project 'Tower Z'",
            "Unknown contractor 'Nobody'",
            "Unusual unit of measure 'Furlong'",
        ]

    def test_match_by_uuid(self):
        self.projects.get_by_uuid.return_value = Project(uuid="01P", project_name="Tower B")
        assert self.service.project_exists("01P") is True

    def test_without_repositories_everything_is_known(self):
        service = MasterDataService()
        assert service.check_references("Anything", "Anyone") == []

    def test_empty_reference_is_not_checked(self):
        assert self.service.project_exists("") is True
        self.projects.get_by_uuid.assert_not_called()
