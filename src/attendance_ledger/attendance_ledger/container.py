from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .database.memory import InMemoryStore
from .records.memory_record_repository import InMemoryRecordRepository
from .records.mysql_record_repository import MySQLRecordRepository
from .records.repository import RecordRepository
from .records.service import RecordService
from .requests.memory_change_request_repository import InMemoryChangeRequestRepository
from .requests.mysql_change_request_repository import MySQLChangeRequestRepository
from .requests.repository import ChangeRequestRepository
from .requests.service import ChangeRequestService
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService

BACKEND_MYSQL = "mysql"
BACKEND_MEMORY = "memory"


@dataclass(frozen=True)
class Container:
    backend: str

    users_repo: UserRepository
    records_repo: RecordRepository
    requests_repo: ChangeRequestRepository

    auth_service: AuthService
    user_service: UserService
    record_service: RecordService
    change_request_service: ChangeRequestService


def _wire(backend: str, users_repo, records_repo, requests_repo) -> Container:
    return Container(
        backend=backend,
        users_repo=users_repo,
        records_repo=records_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        record_service=RecordService(records_repo),
        change_request_service=ChangeRequestService(requests_repo, records_repo),
    )


def build_memory_container(store: Optional[InMemoryStore] = None) -> Container:
    store = store or InMemoryStore()
    return _wire(
        BACKEND_MEMORY,
        InMemoryUserRepository(store),
        InMemoryRecordRepository(store),
        InMemoryChangeRequestRepository(store),
    )


def build_mysql_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return _wire(
        BACKEND_MYSQL,
        MySQLUserRepository(conn),
        MySQLRecordRepository(conn),
        MySQLChangeRequestRepository(conn),
    )


def build_container(*, backend: str = BACKEND_MYSQL, db_config: Optional[dict] = None) -> Container:
    backend = (backend or BACKEND_MYSQL).lower()
    if backend == BACKEND_MEMORY:
        return build_memory_container()
    if backend == BACKEND_MYSQL:
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql backend")
        return build_mysql_container(db_config=db_config)
    raise ValidationError(f"Unknown storage backend: {backend!r}")
