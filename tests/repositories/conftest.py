import pytest
from sqlalchemy import Connection

from paygo.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyContractorRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyWeeklyRecordRepository,
)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def record_repo(db_connection: Connection) -> SQLAlchemyWeeklyRecordRepository:
    return SQLAlchemyWeeklyRecordRepository(db_connection)


@pytest.fixture()
def payment_repo(db_connection: Connection) -> SQLAlchemyPaymentRepository:
    return SQLAlchemyPaymentRepository(db_connection)


@pytest.fixture()
def project_repo(db_connection: Connection) -> SQLAlchemyProjectRepository:
    return SQLAlchemyProjectRepository(db_connection)


@pytest.fixture()
def contractor_repo(db_connection: Connection) -> SQLAlchemyContractorRepository:
    return SQLAlchemyContractorRepository(db_connection)


@pytest.fixture()
def user_repo(db_connection: Connection) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_connection)
