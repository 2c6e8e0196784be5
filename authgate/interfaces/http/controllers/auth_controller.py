# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.refresh_token import RefreshTokenUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.domain.users.entities import AuthResult
from authgate.interfaces.http.authentication import (
    TokenAuthenticator,
    current_account,
    current_token,
)
from authgate.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    TokenRefreshDTO,
    UserDTO,
)
from authgate.shared.errors.validation import raise_validation_error
from authgate.shared.logging import logger
from authgate.shared.utils.http import client_ip


def _auth_payload(message: str, result: AuthResult) -> dict:
    return AuthSuccessDTO(
        message=message,
        user=UserDTO(
            id=result.account.id,
            email=result.account.email,
            display_name=result.account.display_name,
        ),
        token=result.token.token,
    ).model_dump()


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_use_case: RefreshTokenUseCase,
        authenticator: TokenAuthenticator,
        trust_proxy: bool = False,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._authenticator = authenticator
        self._trust_proxy = trust_proxy

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._register_use_case.execute(dto.email, dto.password, dto.display_name)

        logger.info(f"auth.register: created account_id={result.account.id}")
        return jsonify(_auth_payload("User registered successfully", result)), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._login_use_case.execute(
            dto.email,
            dto.password,
            client_ip(trust_proxy=self._trust_proxy),
            request.headers.get("User-Agent"),
        )
        return jsonify(_auth_payload("Login successful", result)), 200

    def logout(self) -> tuple[Response, int]:
        # Tokens are stateless; the client drops its copy.
        logger.info(f"auth.logout: account_id={current_account().id}")
        return (
            jsonify(
                {
                    "message": "Logout successful",
                    "note": "Please remove the token from client storage",
                }
            ),
            200,
        )

    def refresh(self) -> tuple[Response, int]:
        issued = self._refresh_use_case.execute(current_token())
        return jsonify(TokenRefreshDTO(token=issued.token).model_dump()), 200

    def verify(self) -> tuple[Response, int]:
        account = current_account()
        user = UserDTO(id=account.id, email=account.email, display_name=account.display_name)
        return jsonify({"message": "Token is valid", "user": user.model_dump()}), 200

    def as_blueprint(self) -> Blueprint:
        required = self._authenticator.token_required
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=required(self.logout), methods=["POST"])
        bp.add_url_rule("/refresh", view_func=required(self.refresh), methods=["POST"])
        bp.add_url_rule("/verify", view_func=required(self.verify), methods=["GET"])
        return bp
