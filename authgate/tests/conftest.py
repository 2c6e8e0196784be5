from __future__ import annotations

import pytest

from authgate.application.services.rate_limiter import LoginRateLimiter
from authgate.application.services.tokens import JwtTokenService

from .fakes import (
    TEST_SECRET,
    DeterministicHasher,
    FakeClock,
    InMemoryAccountRepository,
    InMemoryLoginAttemptRepository,
)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def accounts() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture()
def attempts() -> InMemoryLoginAttemptRepository:
    return InMemoryLoginAttemptRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def tokens(clock: FakeClock) -> JwtTokenService:
    return JwtTokenService(TEST_SECRET, clock=clock)


@pytest.fixture()
def rate_limiter(attempts: InMemoryLoginAttemptRepository, clock: FakeClock) -> LoginRateLimiter:
    return LoginRateLimiter(attempts, clock=clock)
