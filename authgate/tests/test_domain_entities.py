from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authgate.domain import InvariantViolation
from authgate.domain.users.entities import Account, AccountState, normalize_email

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _account(**overrides: object) -> Account:
    fields: dict[str, object] = {
        "id": 1,
        "email": "a@x.com",
        "password_hash": "digest",
        "display_name": "Ann",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Account(**fields)  # type: ignore[arg-type]


def test_normalize_email() -> None:
    assert normalize_email("  Ann@Example.COM ") == "ann@example.com"


def test_negative_failure_counter_rejected() -> None:
    with pytest.raises(InvariantViolation):
        _account(failed_login_attempts=-1)


def test_active_account_state() -> None:
    account = _account()

    assert account.state(NOW) is AccountState.ACTIVE
    assert account.lockout_remaining(NOW) == 0


def test_lockout_in_future_is_locked() -> None:
    account = _account(locked_until=NOW + timedelta(minutes=10), failed_login_attempts=5)

    assert account.state(NOW) is AccountState.LOCKED
    assert account.lockout_remaining(NOW) == 600


def test_lockout_in_past_expires_lazily() -> None:
    account = _account(locked_until=NOW - timedelta(seconds=1), failed_login_attempts=5)

    assert account.state(NOW) is AccountState.ACTIVE
    assert account.lockout_remaining(NOW) == 0


def test_locked_takes_precedence_over_deactivated() -> None:
    account = _account(locked_until=NOW + timedelta(minutes=1), is_active=False)

    assert account.state(NOW) is AccountState.LOCKED
    assert account.state(NOW + timedelta(minutes=2)) is AccountState.DEACTIVATED
