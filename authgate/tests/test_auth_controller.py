from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from authgate.application.use_cases.users.verify_token import VerifyTokenUseCase
from authgate.domain.users.entities import (
    Account,
    AuthenticatedAccount,
    AuthResult,
    IssuedToken,
)
from authgate.domain.users.exceptions import (
    AccountLockedError,
    RateLimitedError,
    TokenExpiredError,
)
from authgate.interfaces.http.authentication import TokenAuthenticator
from authgate.interfaces.http.controllers.auth_controller import AuthController
from authgate.shared.middleware.error_handler import configure_error_handling

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _result(email: str = "a@x.com") -> AuthResult:
    return AuthResult(
        account=Account(
            id=1,
            email=email,
            password_hash="digest",
            display_name="Ann",
            created_at=NOW,
            updated_at=NOW,
        ),
        token=IssuedToken(token="token123", expires_at=NOW + timedelta(hours=24)),
    )


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _register_controller(
    app: Flask,
    *,
    register: object | None = None,
    login: object | None = None,
    refresh: object | None = None,
    verify: object | None = None,
) -> None:
    authenticator = TokenAuthenticator(cast(VerifyTokenUseCase, verify or MagicMock()))
    controller = AuthController(
        register_use_case=register or MagicMock(),  # type: ignore[arg-type]
        login_use_case=login or MagicMock(),  # type: ignore[arg-type]
        refresh_use_case=refresh or MagicMock(),  # type: ignore[arg-type]
        authenticator=authenticator,
    )
    app.register_blueprint(controller.as_blueprint())


def test_register_returns_201_with_token(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.return_value = _result()
    _register_controller(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"email": " A@X.com ", "password": "Abc12345!", "display_name": "Ann"},
        )

    assert response.status_code == 201
    register.execute.assert_called_once_with("a@x.com", "Abc12345!", "Ann")
    payload = response.get_json()
    assert payload["message"] == "User registered successfully"
    assert payload["token"] == "token123"
    assert payload["user"] == {"id": 1, "email": "a@x.com", "display_name": "Ann"}


def test_register_weak_password_returns_400(flask_app: Flask) -> None:
    register = MagicMock()
    _register_controller(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"email": "a@x.com", "password": "abc12345!", "display_name": "Ann"},
        )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["context"]["fields"] == ["password"]
    assert payload["context"]["errors"][0]["type"] == "password_no_uppercase"
    register.execute.assert_not_called()


def test_register_rejects_bad_email_and_display_name(flask_app: Flask) -> None:
    _register_controller(flask_app)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "Abc12345!", "display_name": "Ann1"},
        )

    assert response.status_code == 400
    assert response.get_json()["context"]["fields"] == ["display_name", "email"]


def test_login_invalid_payload_returns_400(flask_app: Flask) -> None:
    _register_controller(flask_app)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"email": "a@x.com"})

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "password" in payload["context"]["fields"]


def test_login_passes_origin_and_client_descriptor(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = _result()
    _register_controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login",
            json={"email": "a@x.com", "password": "whatever"},
            headers={"User-Agent": "pytest-agent"},
            environ_base={"REMOTE_ADDR": "10.1.2.3"},
        )

    assert response.status_code == 200
    assert response.get_json()["message"] == "Login successful"
    login.execute.assert_called_once_with("a@x.com", "whatever", "10.1.2.3", "pytest-agent")


def test_login_rate_limited_sets_retry_after(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = RateLimitedError(retry_after=900)
    _register_controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "whatever"}
        )

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "900"
    payload = response.get_json()
    assert payload["error"] == "rate_limited"
    assert payload["context"]["retry_after"] == 900


def test_login_locked_returns_423(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = AccountLockedError(lockout_remaining=120)
    _register_controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "whatever"}
        )

    assert response.status_code == 423
    assert response.get_json()["error"] == "account_locked"


def test_protected_route_requires_bearer_token(flask_app: Flask) -> None:
    verify = MagicMock()
    _register_controller(flask_app, verify=verify)

    with flask_app.test_client() as client:
        response = client.get("/api/auth/verify")

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_required"
    verify.execute.assert_not_called()


def test_verify_returns_current_account(flask_app: Flask) -> None:
    verify = MagicMock()
    verify.execute.return_value = AuthenticatedAccount(id=1, email="a@x.com", display_name="Ann")
    _register_controller(flask_app, verify=verify)

    with flask_app.test_client() as client:
        response = client.get("/api/auth/verify", headers={"Authorization": "Bearer abc"})

    assert response.status_code == 200
    verify.execute.assert_called_once_with("abc")
    assert response.get_json()["user"]["email"] == "a@x.com"


def test_expired_token_returns_token_expired(flask_app: Flask) -> None:
    verify = MagicMock()
    verify.execute.side_effect = TokenExpiredError()
    _register_controller(flask_app, verify=verify)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/refresh", headers={"Authorization": "Bearer abc"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"


def test_refresh_returns_new_token(flask_app: Flask) -> None:
    verify = MagicMock()
    verify.execute.return_value = AuthenticatedAccount(id=1, email="a@x.com", display_name="Ann")
    refresh = MagicMock()
    refresh.execute.return_value = IssuedToken(token="fresh", expires_at=NOW)
    _register_controller(flask_app, verify=verify, refresh=refresh)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/refresh", headers={"Authorization": "Bearer abc"})

    assert response.status_code == 200
    refresh.execute.assert_called_once_with("abc")
    assert response.get_json() == {"message": "Token refreshed successfully", "token": "fresh"}
