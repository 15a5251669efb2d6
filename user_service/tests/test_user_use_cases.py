from __future__ import annotations

from datetime import timedelta
from typing import cast

import pytest

from user_service.application.services.password_hashing import WerkzeugPasswordHasher
from user_service.application.services.tokens import JwtTokenService
from user_service.application.use_cases.users.change_password import ChangePasswordUseCase
from user_service.application.use_cases.users.delete_account import DeleteAccountUseCase
from user_service.application.use_cases.users.get_profile import GetProfileUseCase
from user_service.application.use_cases.users.login_user import LoginUserUseCase
from user_service.application.use_cases.users.refresh_token import RefreshTokenUseCase
from user_service.application.use_cases.users.register_user import (
    RegisterUserInput,
    RegisterUserUseCase,
)
from user_service.application.use_cases.users.update_profile import UpdateProfileUseCase
from user_service.domain.users.entities import User
from user_service.domain.users.exceptions import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidTokenError,
    UserNotFoundError,
    WeakPasswordError,
)
from user_service.domain.users.repositories import PasswordHasher

from .fakes import TEST_SECRET, DeterministicHasher, FakeClock, InMemoryUserRepository


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tokens(clock: FakeClock) -> JwtTokenService:
    return JwtTokenService(
        secret=TEST_SECRET,
        expiration=timedelta(hours=24),
        refresh_grace=timedelta(minutes=5),
        clock=clock,
    )


def _register(
    users: InMemoryUserRepository,
    hasher: PasswordHasher,
    clock: FakeClock,
    email: str = "a@b.com",
    password: str = "Abcd1234",
    name: str = "A",
) -> User:
    use_case = RegisterUserUseCase(users=users, password_hasher=hasher, clock=clock)
    return use_case.execute(RegisterUserInput(email=email, password=password, name=name))


def test_register_user_success(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    user = _register(users, hasher, clock)

    assert user.id
    assert user.email == "a@b.com"
    assert user.name == "A"
    assert user.password_hash != "Abcd1234"
    assert hasher.verify("Abcd1234", user.password_hash)
    assert user.created_at == user.updated_at == clock.now
    assert users.find_by_email("a@b.com") == user


def test_register_duplicate_email(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    _register(users, hasher, clock)

    with pytest.raises(EmailAlreadyExistsError):
        _register(users, hasher, clock, password="Other1234")


def test_register_rejects_invalid_email(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    with pytest.raises(InvalidEmailError):
        _register(users, hasher, clock, email="nope")
    assert users.find_by_email("nope") is None


def test_register_validates_plaintext_password(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    with pytest.raises(WeakPasswordError):
        _register(users, hasher, clock, password="abcdefgh")
    assert users.find_by_email("a@b.com") is None


def test_login_returns_token_for_user(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    registered = _register(users, hasher, clock)
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher, clock=clock)

    user, issued = login.execute("a@b.com", "Abcd1234")

    assert user.id == registered.id
    claims = tokens.validate(issued.token)
    assert claims.user_id == registered.id
    assert claims.email == "a@b.com"


def test_login_wrong_password_and_unknown_email_look_the_same(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    _register(users, hasher, clock)
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher, clock=clock)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("a@b.com", "wrongpw")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        login.execute("nobody@b.com", "Abcd1234")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()


def test_login_unknown_email_still_verifies_a_hash(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher, clock=clock)

    with pytest.raises(InvalidCredentialsError):
        login.execute("nobody@b.com", "Abcd1234")

    assert hasher.verify_calls == 1


def test_login_rehashes_outdated_hash(
    users: InMemoryUserRepository, clock: FakeClock, tokens: JwtTokenService
) -> None:
    registered = _register(users, DeterministicHasher(method="old"), clock)
    clock.advance(minutes=1)
    hasher = DeterministicHasher(method="new")
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher, clock=clock)

    user, _ = login.execute("a@b.com", "Abcd1234")

    assert user.password_hash.startswith("new$")
    assert users.find_by_id(registered.id).password_hash.startswith("new$")


def test_login_keeps_current_hash(
    users: InMemoryUserRepository, clock: FakeClock, tokens: JwtTokenService
) -> None:
    hasher = WerkzeugPasswordHasher(method="scrypt")
    registered = _register(users, hasher, clock)
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher, clock=clock)

    for _ in range(3):
        clock.advance(minutes=1)
        login.execute("a@b.com", "Abcd1234")

    assert users.find_by_id(registered.id) == registered


def test_get_profile(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)

    assert GetProfileUseCase(users=users).execute(registered.id) == registered
    with pytest.raises(UserNotFoundError):
        GetProfileUseCase(users=users).execute("missing")


def test_update_profile_changes_only_name(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)
    clock.advance(seconds=30)

    updated = UpdateProfileUseCase(users=users, clock=clock).execute(registered.id, "B")

    assert updated.name == "B"
    assert updated.email == registered.email
    assert updated.id == registered.id
    assert updated.password_hash == registered.password_hash
    assert updated.created_at == registered.created_at
    assert updated.updated_at > registered.updated_at


def test_update_profile_advances_updated_at_with_frozen_clock(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)

    updated = UpdateProfileUseCase(users=users, clock=clock).execute(registered.id, "B")

    assert updated.updated_at > registered.updated_at


def test_update_profile_missing_user(users: InMemoryUserRepository, clock: FakeClock) -> None:
    with pytest.raises(UserNotFoundError):
        UpdateProfileUseCase(users=users, clock=clock).execute("missing", "B")


def test_refresh_token_reissues(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    registered = _register(users, hasher, clock)
    issued = tokens.issue(registered.id, registered.email)
    clock.advance(hours=1)

    refreshed = RefreshTokenUseCase(users=users, tokens=tokens).execute(issued.token)

    assert refreshed.expires_at > issued.expires_at
    assert tokens.validate(refreshed.token).user_id == registered.id


def test_refresh_token_for_deleted_user_is_invalid(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    registered = _register(users, hasher, clock)
    issued = tokens.issue(registered.id, registered.email)
    DeleteAccountUseCase(users=users).execute(registered.id)

    with pytest.raises(InvalidTokenError):
        RefreshTokenUseCase(users=users, tokens=tokens).execute(issued.token)


def test_refresh_token_picks_up_current_email(
    users: InMemoryUserRepository,
    hasher: DeterministicHasher,
    clock: FakeClock,
    tokens: JwtTokenService,
) -> None:
    registered = _register(users, hasher, clock)
    issued = tokens.issue(registered.id, "old@b.com")

    refreshed = RefreshTokenUseCase(users=users, tokens=tokens).execute(issued.token)

    assert refreshed.claims.email == "a@b.com"


def test_change_password(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)
    use_case = ChangePasswordUseCase(users=users, password_hasher=hasher, clock=clock)

    use_case.execute(registered.id, "Abcd1234", "Newpass99")

    stored = cast(User, users.find_by_id(registered.id))
    assert hasher.verify("Newpass99", stored.password_hash)
    assert not hasher.verify("Abcd1234", stored.password_hash)


def test_change_password_requires_current_password(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)
    use_case = ChangePasswordUseCase(users=users, password_hasher=hasher, clock=clock)

    with pytest.raises(InvalidCredentialsError):
        use_case.execute(registered.id, "wrongpw", "Newpass99")


def test_change_password_rejects_weak_new_password(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)
    use_case = ChangePasswordUseCase(users=users, password_hasher=hasher, clock=clock)

    with pytest.raises(WeakPasswordError):
        use_case.execute(registered.id, "Abcd1234", "short")


def test_delete_account(
    users: InMemoryUserRepository, hasher: DeterministicHasher, clock: FakeClock
) -> None:
    registered = _register(users, hasher, clock)

    DeleteAccountUseCase(users=users).execute(registered.id)

    assert users.find_by_id(registered.id) is None
    with pytest.raises(UserNotFoundError):
        DeleteAccountUseCase(users=users).execute(registered.id)
    with pytest.raises(EmailAlreadyExistsError):
        _register(users, hasher, clock)
