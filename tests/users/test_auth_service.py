from __future__ import annotations

import dataclasses

import pytest

from src.ebus_management.ebus_management.container import build_container
from src.ebus_management.ebus_management.core.enums import ActivityType, Role
from src.ebus_management.ebus_management.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from src.ebus_management.ebus_management.storage.memory_store import InMemoryStore


def _container():
    return build_container(store=InMemoryStore())


def test_register_defaults_to_user_role_and_remembers_session():
    c = _container()

    session = c.auth_service.register(full_name="Asha Rao", email=" Asha@Example.com ", password="secret1")

    assert session.role == Role.USER
    assert session.email == "asha@example.com"
    assert c.auth_service.current_session() == session

    user = c.users_repo.get_by_id(session.user_id)
    assert user.full_name == "Asha Rao"
    assert user.password_hash and user.password_hash != "secret1"
    assert "passwordHash" not in user.to_public()

    (activity,) = c.activity_log.recent(10)
    assert activity.type == ActivityType.USER_REGISTERED.value
    assert activity.description == "New user registered: Asha Rao"
    assert activity.user_id == session.user_id


def test_register_rejects_duplicate_email_case_insensitively():
    c = _container()
    c.auth_service.register(full_name="A", email="dup@example.com", password="secret1")

    with pytest.raises(ValidationError, match="Email already exists"):
        c.auth_service.register(full_name="B", email="DUP@example.com", password="secret2")

    assert len(c.users_repo.list_all()) == 1


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"full_name": "", "email": "a@b.co", "password": "secret1"}, "Please fill all required fields"),
        ({"full_name": "A", "email": "not-an-email", "password": "secret1"}, "valid email"),
        ({"full_name": "A", "email": "a@b.co", "password": "123"}, "at least 6 characters"),
        ({"full_name": "A", "email": "a@b.co", "password": "secret1", "role": Role.ADMIN}, "cannot be self-registered"),
    ],
)
def test_register_validation(kwargs, message):
    c = _container()
    with pytest.raises(ValidationError, match=message):
        c.auth_service.register(**kwargs)
    assert c.users_repo.list_all() == []


def test_login_checks_password_and_updates_last_login():
    c = _container()
    registered = c.auth_service.register(
        full_name="Ravi", email="ravi@example.com", password="secret1", role=Role.DRIVER, remember=False
    )
    assert c.auth_service.current_session() is None

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        c.auth_service.login("ravi@example.com", "wrong-pass")

    session = c.auth_service.login("RAVI@example.com", "secret1")
    assert session.user_id == registered.user_id
    assert session.role == Role.DRIVER
    assert c.auth_service.current_session() == session

    c.auth_service.logout()
    assert c.auth_service.current_session() is None


def test_login_rejects_missing_input_and_inactive_accounts():
    c = _container()
    with pytest.raises(AuthenticationError, match="Please enter email and password"):
        c.auth_service.login("", "")

    session = c.auth_service.register(full_name="Gone", email="gone@example.com", password="secret1")
    user = c.users_repo.get_by_id(session.user_id)
    c.users_repo.save(dataclasses.replace(user, is_active=False))

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        c.auth_service.login("gone@example.com", "secret1")


def test_profile_helpers():
    c = _container()
    created = c.auth_service.create_user_profile("u-1", {"fullName": "Meena", "email": "meena@example.com"})
    assert created.role == Role.USER
    assert c.auth_service.get_user_role("u-1").email == "meena@example.com"
    assert c.auth_service.get_user_role("missing") is None

    updated = c.auth_service.update_user_profile("u-1", {"phone": "+91 98765 43210"})
    assert updated.phone == "+91 98765 43210"

    with pytest.raises(ValidationError, match="Field cannot be updated: role"):
        c.auth_service.update_user_profile("u-1", {"role": "admin"})
    with pytest.raises(NotFoundError):
        c.auth_service.update_user_profile("nobody", {"fullName": "X"})


def test_ensure_admin_account_is_idempotent():
    c = _container()
    first = c.auth_service.ensure_admin_account(full_name="Admin", email="admin@test.local", password="admin123")
    second = c.auth_service.ensure_admin_account(full_name="Admin", email="admin@test.local", password="admin123")

    assert first.id == second.id
    assert first.role == Role.ADMIN
    assert c.auth_service.login("admin@test.local", "admin123").role == Role.ADMIN
