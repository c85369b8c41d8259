from __future__ import annotations

import pytest

from attendance_ledger.core.enums import Role
from attendance_ledger.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from attendance_ledger.database.bootstrap import ensure_admin_user
from attendance_ledger.database.memory import InMemoryStore
from attendance_ledger.users.memory_user_repository import InMemoryUserRepository
from attendance_ledger.users.service import AuthService, UserService


def make_services():
    repo = InMemoryUserRepository(InMemoryStore())
    return UserService(repo), AuthService(repo), repo


def test_admin_creates_employee_who_can_log_in():
    users, auth, _ = make_services()

    created = users.create_user(
        current_role=Role.ADMIN, name=" Ana ", email="Ana@Example.com", password="secret1"
    )

    assert (created.name, created.email, created.role, created.active) == ("Ana", "ana@example.com", Role.EMPLOYEE, True)
    assert created.password_hash != "secret1"

    session_user = auth.authenticate("ANA@example.com", "secret1")
    assert session_user.user_id == created.user_id
    assert session_user.role == Role.EMPLOYEE


def test_only_admin_can_create_users():
    users, _, _ = make_services()
    with pytest.raises(AuthorizationError):
        users.create_user(current_role=Role.EMPLOYEE, name="Bo", email="bo@example.com", password="secret1")


@pytest.mark.parametrize(
    "name, email, password",
    [
        ("", "bo@example.com", "secret1"),
        ("Bo", "not-an-email", "secret1"),
        ("Bo", "bo@example.com", "short"),
    ],
)
def test_create_user_validates_input(name, email, password):
    users, _, _ = make_services()
    with pytest.raises(ValidationError):
        users.create_user(current_role=Role.ADMIN, name=name, email=email, password=password)


def test_duplicate_email_is_conflict():
    users, _, _ = make_services()
    users.create_user(current_role=Role.ADMIN, name="Bo", email="bo@example.com", password="secret1")

    with pytest.raises(ConflictError):
        users.create_user(current_role=Role.ADMIN, name="Bob", email="BO@example.com", password="secret2")


def test_bad_password_and_unknown_email_are_rejected():
    users, auth, _ = make_services()
    users.create_user(current_role=Role.ADMIN, name="Bo", email="bo@example.com", password="secret1")

    with pytest.raises(AuthenticationError):
        auth.authenticate("bo@example.com", "wrong-pass")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@example.com", "secret1")


def test_disabled_user_cannot_log_in():
    users, auth, _ = make_services()
    bo = users.create_user(current_role=Role.ADMIN, name="Bo", email="bo@example.com", password="secret1")

    users.disable_user(current_role=Role.ADMIN, user_id=bo.user_id)

    assert users.get_user(bo.user_id).active is False
    with pytest.raises(AuthenticationError):
        auth.authenticate("bo@example.com", "secret1")


def test_disable_requires_admin_and_existing_user():
    users, _, _ = make_services()
    with pytest.raises(AuthorizationError):
        users.disable_user(current_role=Role.EMPLOYEE, user_id=1)
    with pytest.raises(NotFoundError):
        users.disable_user(current_role=Role.ADMIN, user_id=404)


def test_list_users_sorted_by_name():
    users, _, _ = make_services()
    for name in ("Cleo", "Ana", "Bo"):
        users.create_user(current_role=Role.ADMIN, name=name, email=f"{name.lower()}@example.com", password="secret1")

    assert [u.name for u in users.list_users()] == ["Ana", "Bo", "Cleo"]


def test_ensure_admin_is_idempotent_and_promotes_existing_account():
    users, auth, repo = make_services()
    bo = users.create_user(current_role=Role.ADMIN, name="Bo", email="bo@example.com", password="secret1")
    users.disable_user(current_role=Role.ADMIN, user_id=bo.user_id)

    promoted = ensure_admin_user(repo, email="bo@example.com", password="newpass1")
    again = ensure_admin_user(repo, email="bo@example.com", password="newpass1")

    assert promoted.user_id == again.user_id == bo.user_id
    assert (again.role, again.active) == (Role.ADMIN, True)
    assert len(users.list_users()) == 1
    assert auth.authenticate("bo@example.com", "newpass1").role == Role.ADMIN


def test_ensure_admin_creates_missing_account():
    users, _, repo = make_services()

    admin = ensure_admin_user(repo, email="root@example.com", password="rootpass")

    assert (admin.name, admin.role) == ("Administrator", Role.ADMIN)
    assert users.get_user(admin.user_id).email == "root@example.com"
