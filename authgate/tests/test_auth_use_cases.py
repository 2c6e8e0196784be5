from __future__ import annotations

import pytest

from authgate.application.services.rate_limiter import LoginRateLimiter
from authgate.application.services.tokens import JwtTokenService
from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.domain.users.exceptions import (
    AccountDeactivatedError,
    AccountLockedError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    RateLimitedError,
)

from .fakes import (
    DeterministicHasher,
    FakeClock,
    InMemoryAccountRepository,
    InMemoryLoginAttemptRepository,
)

PASSWORD = "Abc12345!"


@pytest.fixture()
def register(
    accounts: InMemoryAccountRepository,
    tokens: JwtTokenService,
    hasher: DeterministicHasher,
    clock: FakeClock,
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        accounts=accounts, tokens=tokens, password_hasher=hasher, clock=clock
    )


@pytest.fixture()
def login(
    accounts: InMemoryAccountRepository,
    attempts: InMemoryLoginAttemptRepository,
    tokens: JwtTokenService,
    hasher: DeterministicHasher,
    rate_limiter: LoginRateLimiter,
    clock: FakeClock,
) -> LoginUserUseCase:
    return LoginUserUseCase(
        accounts=accounts,
        attempts=attempts,
        tokens=tokens,
        password_hasher=hasher,
        rate_limiter=rate_limiter,
        clock=clock,
    )


def test_register_issues_token_for_normalized_email(
    register: RegisterUserUseCase, tokens: JwtTokenService
) -> None:
    result = register.execute("  A@X.com ", PASSWORD, "Ann")

    assert result.account.email == "a@x.com"
    assert result.account.display_name == "Ann"
    claims = tokens.verify(result.token.token)
    assert claims.email == "a@x.com"
    assert claims.account_id == result.account.id


def test_register_stores_hash_not_password(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.password_hash == f"hashed:{PASSWORD}"


def test_register_duplicate_email_is_case_insensitive(register: RegisterUserUseCase) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
        register.execute("A@X.COM", PASSWORD, "Other")

    assert exc_info.value.code == "conflict"


def test_login_success_records_attempt_and_updates_account(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    attempts: InMemoryLoginAttemptRepository,
    tokens: JwtTokenService,
    clock: FakeClock,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    result = login.execute("A@x.com", PASSWORD, "10.0.0.1", "pytest-agent")

    assert result.account.email == "a@x.com"
    assert tokens.verify(result.token.token).email == "a@x.com"
    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.last_login_at == clock.now
    assert stored.failed_login_attempts == 0
    assert len(attempts.records) == 1
    record = attempts.records[0]
    assert record.success is True
    assert record.ip_address == "10.0.0.1"
    assert record.user_agent == "pytest-agent"


def test_five_failures_lock_account_even_for_correct_password(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    attempts: InMemoryLoginAttemptRepository,
    clock: FakeClock,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("a@x.com", "wrong", "10.0.0.1")

    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.failed_login_attempts == 5
    assert stored.is_locked(clock.now)
    assert len(attempts.records) == 5

    # A different origin passes the rate limiter and reaches the lockout check.
    with pytest.raises(AccountLockedError) as exc_info:
        login.execute("a@x.com", PASSWORD, "10.0.0.2")

    assert exc_info.value.code == "account_locked"
    assert exc_info.value.context == {"lockout_remaining_seconds": 900.0}
    assert len(attempts.records) == 5
    unchanged = accounts.find_by_email("a@x.com")
    assert unchanged is not None
    assert unchanged.failed_login_attempts == 5


def test_fourth_failure_does_not_lock(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    clock: FakeClock,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    for _ in range(4):
        with pytest.raises(InvalidCredentialsError):
            login.execute("a@x.com", "wrong", "10.0.0.1")

    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.failed_login_attempts == 4
    assert stored.locked_until is None
    assert not stored.is_locked(clock.now)


@pytest.mark.parametrize("failures", [1, 2, 3, 4])
def test_success_after_failures_resets_counter(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    failures: int,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")
    for _ in range(failures):
        with pytest.raises(InvalidCredentialsError):
            login.execute("a@x.com", "wrong", "10.0.0.1")

    result = login.execute("a@x.com", PASSWORD, "10.0.0.1")

    assert result.account.failed_login_attempts == 0
    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.failed_login_attempts == 0
    assert stored.locked_until is None


def test_lockout_expires_lazily(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    clock: FakeClock,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("a@x.com", "wrong", "10.0.0.1")

    clock.advance(minutes=16)
    result = login.execute("a@x.com", PASSWORD, "10.0.0.1")

    assert result.account.email == "a@x.com"
    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.failed_login_attempts == 0
    assert stored.locked_until is None


def test_failure_after_expired_lock_relocks(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    clock: FakeClock,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("a@x.com", "wrong", "10.0.0.1")

    clock.advance(minutes=16)
    with pytest.raises(InvalidCredentialsError):
        login.execute("a@x.com", "wrong", "10.0.0.1")

    stored = accounts.find_by_email("a@x.com")
    assert stored is not None
    assert stored.failed_login_attempts == 6
    assert stored.is_locked(clock.now)


def test_unknown_email_matches_wrong_password_error(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    attempts: InMemoryLoginAttemptRepository,
) -> None:
    register.execute("a@x.com", PASSWORD, "Ann")

    with pytest.raises(InvalidCredentialsError) as unknown:
        login.execute("nobody@x.com", PASSWORD, "10.0.0.1")
    with pytest.raises(InvalidCredentialsError) as wrong:
        login.execute("a@x.com", "wrong", "10.0.0.1")

    assert unknown.value.to_dict() == wrong.value.to_dict()
    assert unknown.value.message == "Email or password is incorrect"
    assert [r.email for r in attempts.records] == ["nobody@x.com", "a@x.com"]
    assert not any(r.success for r in attempts.records)


def test_unknown_email_still_checks_a_password_hash(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    hasher: DeterministicHasher,
) -> None:
    account = register.execute("a@x.com", PASSWORD, "Ann").account

    with pytest.raises(InvalidCredentialsError):
        login.execute("nobody@x.com", PASSWORD, "10.0.0.1")
    with pytest.raises(InvalidCredentialsError):
        login.execute("a@x.com", "wrong", "10.0.0.1")

    assert hasher.verified == [hasher.dummy_hash, account.password_hash]


def test_deactivated_account_rejected_with_correct_password(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    accounts: InMemoryAccountRepository,
    attempts: InMemoryLoginAttemptRepository,
    clock: FakeClock,
) -> None:
    account = register.execute("a@x.com", PASSWORD, "Ann").account
    accounts.deactivate(account.id, updated_at=clock.now)

    with pytest.raises(AccountDeactivatedError) as exc_info:
        login.execute("a@x.com", PASSWORD, "10.0.0.1")

    assert exc_info.value.code == "account_deactivated"
    assert attempts.records == []


def test_sixth_failure_from_same_origin_is_rate_limited(
    login: LoginUserUseCase,
    attempts: InMemoryLoginAttemptRepository,
) -> None:
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("ghost@x.com", "wrong", "10.0.0.1")

    with pytest.raises(RateLimitedError) as exc_info:
        login.execute("ghost@x.com", "wrong", "10.0.0.1")

    assert exc_info.value.retry_after == 900
    assert exc_info.value.code == "rate_limited"
    assert len(attempts.records) == 5


def test_rate_limit_is_per_origin(login: LoginUserUseCase) -> None:
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("ghost@x.com", "wrong", "10.0.0.1")

    with pytest.raises(InvalidCredentialsError):
        login.execute("ghost@x.com", "wrong", "10.0.0.2")
