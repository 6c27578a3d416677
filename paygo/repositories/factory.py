from paygo.repositories.base import (
    BillRepository,
    ContractorRepository,
    PaymentRepository,
    ProjectRepository,
    UserRepository,
    WeeklyRecordRepository,
)


def get_bill_repository() -> BillRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_weekly_record_repository() -> WeeklyRecordRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyWeeklyRecordRepository

    return SQLAlchemyWeeklyRecordRepository(get_connection())


def get_payment_repository() -> PaymentRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyPaymentRepository

    return SQLAlchemyPaymentRepository(get_connection())


def get_project_repository() -> ProjectRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyProjectRepository

    return SQLAlchemyProjectRepository(get_connection())


def get_contractor_repository() -> ContractorRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyContractorRepository

    return SQLAlchemyContractorRepository(get_connection())


def get_user_repository() -> UserRepository:
    from paygo.db import get_connection
    from paygo.repositories.sqlalchemy import SQLAlchemyUserRepository

    return SQLAlchemyUserRepository(get_connection())
