# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authgate.application.use_cases.users.deactivate_user import DeactivateUserUseCase
from authgate.application.use_cases.users.get_account_stats import GetAccountStatsUseCase
from authgate.application.use_cases.users.get_login_history import GetLoginHistoryUseCase
from authgate.application.use_cases.users.get_profile import GetProfileUseCase
from authgate.application.use_cases.users.update_profile import UpdateProfileUseCase
from authgate.interfaces.http.authentication import TokenAuthenticator, current_account
from authgate.interfaces.http.dto.profile import (
    LoginAttemptDTO,
    LoginHistoryQueryDTO,
    ProfileDTO,
    ProfileUpdateRequestDTO,
)
from authgate.shared.errors.validation import raise_validation_error


class ProfileController:
    def __init__(
        self,
        *,
        get_profile: GetProfileUseCase,
        update_profile: UpdateProfileUseCase,
        deactivate_user: DeactivateUserUseCase,
        get_stats: GetAccountStatsUseCase,
        get_login_history: GetLoginHistoryUseCase,
        authenticator: TokenAuthenticator,
    ) -> None:
        self._get_profile = get_profile
        self._update_profile = update_profile
        self._deactivate_user = deactivate_user
        self._get_stats = get_stats
        self._get_login_history = get_login_history
        self._authenticator = authenticator

    def profile(self) -> tuple[Response, int]:
        account = self._get_profile.execute(current_account().id)
        return (
            jsonify(
                {
                    "message": "Profile retrieved successfully",
                    "user": ProfileDTO.model_validate(account).model_dump(mode="json"),
                }
            ),
            200,
        )

    def update(self) -> tuple[Response, int]:
        try:
            dto = ProfileUpdateRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        updated = self._update_profile.execute(
            current_account().id,
            display_name=dto.display_name,
            current_password=dto.current_password,
            new_password=dto.new_password,
        )
        return jsonify({"message": "Profile updated successfully", "updated": updated}), 200

    def deactivate(self) -> tuple[Response, int]:
        self._deactivate_user.execute(current_account().id)
        return (
            jsonify(
                {
                    "message": "Account deactivated successfully",
                    "note": "Your account has been deactivated. Contact support to reactivate.",
                }
            ),
            200,
        )

    def stats(self) -> tuple[Response, int]:
        stats = self._get_stats.execute()
        return (
            jsonify({"message": "Statistics retrieved successfully", "stats": stats.to_dict()}),
            200,
        )

    def login_history(self) -> tuple[Response, int]:
        try:
            query = LoginHistoryQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        attempts = self._get_login_history.execute(current_account().email, query.limit)
        history = [
            LoginAttemptDTO.model_validate(attempt).model_dump(mode="json")
            for attempt in attempts
        ]
        return (
            jsonify({"message": "Login history retrieved successfully", "login_history": history}),
            200,
        )

    def as_blueprint(self) -> Blueprint:
        required = self._authenticator.token_required
        bp = Blueprint("user", __name__, url_prefix="/api/user")
        bp.add_url_rule(
            "/profile", endpoint="profile", view_func=required(self.profile), methods=["GET"]
        )
        bp.add_url_rule(
            "/profile", endpoint="update_profile", view_func=required(self.update), methods=["PUT"]
        )
        bp.add_url_rule(
            "/profile",
            endpoint="deactivate",
            view_func=required(self.deactivate),
            methods=["DELETE"],
        )
        bp.add_url_rule("/stats", view_func=required(self.stats), methods=["GET"])
        bp.add_url_rule(
            "/login-history", view_func=required(self.login_history), methods=["GET"]
        )
        return bp
