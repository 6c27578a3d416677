from abc import ABC, abstractmethod

from paygo.models.approval import PayableUnit
from paygo.models.bill import Bill
from paygo.models.contractor import Contractor
from paygo.models.nmr import WeeklyRecord
from paygo.models.payment import Payment
from paygo.models.project import Project
from paygo.models.user import User


class PayableUnitRepository(ABC):
    @abstractmethod
    def create(self, unit: PayableUnit) -> PayableUnit: ...

    @abstractmethod
    def get_by_id(self, unit_id: int) -> PayableUnit | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> PayableUnit | None: ...

    @abstractmethod
    def get_by_number(self, display_number: str) -> PayableUnit | None: ...

    @abstractmethod
    def list_all(self) -> list[PayableUnit]: ...

    @abstractmethod
    def update_approval(self, unit: PayableUnit) -> PayableUnit: ...

    @abstractmethod
    def delete(self, unit_id: int) -> None: ...


class BillRepository(PayableUnitRepository):
    @abstractmethod
    def create(self, unit: Bill) -> Bill: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Bill | None: ...

    @abstractmethod
    def get_by_number(self, display_number: str) -> Bill | None: ...

    @abstractmethod
    def list_all(self) -> list[Bill]: ...

    @abstractmethod
    def delete_with_payments(self, unit_id: int, bill_number: str) -> int: ...


class WeeklyRecordRepository(PayableUnitRepository):
    @abstractmethod
    def create(self, unit: WeeklyRecord) -> WeeklyRecord: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> WeeklyRecord | None: ...

    @abstractmethod
    def list_all(self) -> list[WeeklyRecord]: ...


class PaymentRepository(ABC):
    @abstractmethod
    def create(self, payment: Payment) -> Payment: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Payment | None: ...

    @abstractmethod
    def list_all(self) -> list[Payment]: ...

    @abstractmethod
    def list_by_bill_number(self, bill_number: str) -> list[Payment]: ...

    @abstractmethod
    def delete(self, payment_id: int) -> None: ...


class ProjectRepository(ABC):
    @abstractmethod
    def create(self, project: Project) -> Project: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Project | None: ...

    @abstractmethod
    def find_by_name(self, project_name: str) -> Project | None: ...

    @abstractmethod
    def list_all(self) -> list[Project]: ...

    @abstractmethod
    def update(self, project: Project) -> Project: ...

    @abstractmethod
    def delete(self, project_id: int) -> None: ...


class ContractorRepository(ABC):
    @abstractmethod
    def create(self, contractor: Contractor) -> Contractor: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Contractor | None: ...

    @abstractmethod
    def find_by_name(self, contractor_name: str) -> Contractor | None: ...

    @abstractmethod
    def list_all(self) -> list[Contractor]: ...

    @abstractmethod
    def update(self, contractor: Contractor) -> Contractor: ...

    @abstractmethod
    def delete(self, contractor_id: int) -> None: ...


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_principal(self, principal: str) -> User | None: ...

    @abstractmethod
    def list_all(self) -> list[User]: ...

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def update(self, user: User) -> User: ...

    @abstractmethod
    def delete(self, user_id: int) -> None: ...
