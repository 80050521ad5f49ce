from __future__ import annotations

import pytest

from campusdesk.application.services.session_manager import SessionManager
from campusdesk.application.use_cases.users.login_user import LoginUserUseCase
from campusdesk.application.use_cases.users.logout_user import LogoutUserUseCase
from campusdesk.application.use_cases.users.register_user import RegisterUserUseCase
from campusdesk.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError


@pytest.fixture()
def manager(users, sessions, clock) -> SessionManager:
    return SessionManager(sessions=sessions, users=users, clock=clock)


@pytest.fixture()
def register(users, manager, hasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, sessions=manager, password_hasher=hasher)


@pytest.fixture()
def login(users, manager, hasher) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, sessions=manager, password_hasher=hasher)


def test_register_user_success(register: RegisterUserUseCase, users, manager) -> None:
    user, issued = register.execute("Alice@Example.com ", "secret123", "Alice A")

    assert user.email == "alice@example.com"
    assert user.full_name == "Alice A"
    assert user.password_hash == "hashed:secret123"
    assert users.find_by_email("alice@example.com") is not None
    assert manager.validate(issued.token).user == user


def test_register_user_duplicate_raises(register: RegisterUserUseCase) -> None:
    register.execute("alice@example.com", "secret123")

    with pytest.raises(UserAlreadyExistsError):
        register.execute("ALICE@example.com", "other-secret")


def test_login_user_success(register: RegisterUserUseCase, login: LoginUserUseCase, manager) -> None:
    registered, first = register.execute("alice@example.com", "secret123")

    user, issued = login.execute("alice@example.com", "secret123")

    assert user == registered
    assert issued.token != first.token
    assert manager.validate(issued.token).user == registered


def test_login_wrong_password_and_unknown_user_fail_identically(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("alice@example.com", "secret123")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice@example.com", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("nobody@example.com", "secret123")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert wrong_password.value.status == 401
    assert (wrong_password.value.reason, unknown_user.value.reason) == (
        "wrong_password",
        "unknown_email",
    )


def test_login_with_malformed_stored_hash_is_invalid_credentials(
    users, manager
) -> None:
    from campusdesk.application.services.password_hashing import WerkzeugPasswordHasher

    register = RegisterUserUseCase(users=users, sessions=manager, password_hasher=_RawHasher())
    register.execute("alice@example.com", "secret123")
    login = LoginUserUseCase(
        users=users, sessions=manager, password_hasher=WerkzeugPasswordHasher()
    )

    with pytest.raises(InvalidCredentialsError) as malformed:
        login.execute("alice@example.com", "secret123")

    assert malformed.value.reason == "malformed_hash"
    assert malformed.value.to_dict() == {"error": "invalid_credentials"}


def test_logout_user_revokes_session(register: RegisterUserUseCase, manager, sessions) -> None:
    _, issued = register.execute("alice@example.com", "secret123")
    logout = LogoutUserUseCase(sessions=manager)

    logout.execute(issued.token)
    logout.execute(issued.token)
    logout.execute(None)

    assert sessions.rows == {}
    assert manager.validate(issued.token).user is None


class _RawHasher:
    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, hashed: str) -> bool:
        return password == hashed
