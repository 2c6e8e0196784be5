"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authgate.application.services.password_hashing import WerkzeugPasswordHasher
from authgate.application.services.rate_limiter import LoginRateLimiter
from authgate.application.services.tokens import JwtTokenService
from authgate.application.use_cases.users.deactivate_user import DeactivateUserUseCase
from authgate.application.use_cases.users.get_account_stats import GetAccountStatsUseCase
from authgate.application.use_cases.users.get_login_history import GetLoginHistoryUseCase
from authgate.application.use_cases.users.get_profile import GetProfileUseCase
from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.refresh_token import RefreshTokenUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.application.use_cases.users.update_profile import UpdateProfileUseCase
from authgate.application.use_cases.users.verify_token import VerifyTokenUseCase
from authgate.infrastructure.db import create_engine_from_config, create_session_factory
from authgate.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyAccountRepository,
    SqlAlchemyLoginAttemptRepository,
)
from authgate.interfaces.http.authentication import TokenAuthenticator
from authgate.interfaces.http.controllers.auth_controller import AuthController
from authgate.interfaces.http.controllers.misc_controller import MiscController
from authgate.interfaces.http.controllers.profile_controller import ProfileController
from authgate.shared.config import AppConfig, load_config
from authgate.shared.utils.clock import Clock, utc_now


class Container:
    """Wires the service together; one instance per application."""

    def __init__(self, config: AppConfig | None = None, *, clock: Clock = utc_now) -> None:
        self.config = config or load_config()
        self.clock = clock

    @cached_property
    def engine(self) -> Engine:
        return create_engine_from_config(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.security.password_hash_method)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.security.jwt_secret,
            default_ttl=self.config.security.token_ttl,
            clock=self.clock,
        )

    @cached_property
    def account_repository(self) -> SqlAlchemyAccountRepository:
        return SqlAlchemyAccountRepository(self.session_factory)

    @cached_property
    def login_attempt_repository(self) -> SqlAlchemyLoginAttemptRepository:
        return SqlAlchemyLoginAttemptRepository(self.session_factory)

    @cached_property
    def rate_limiter(self) -> LoginRateLimiter:
        policy = self.config.rate_limit
        return LoginRateLimiter(
            self.login_attempt_repository,
            max_failures=policy.max_failures,
            window=policy.window,
            retry_after=policy.retry_after,
            clock=self.clock,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            accounts=self.account_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            accounts=self.account_repository,
            attempts=self.login_attempt_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            rate_limiter=self.rate_limiter,
            max_failed_attempts=self.config.lockout.max_failed_attempts,
            lockout_duration=self.config.lockout.lockout_duration,
            clock=self.clock,
        )

    @cached_property
    def verify_token_use_case(self) -> VerifyTokenUseCase:
        return VerifyTokenUseCase(accounts=self.account_repository, tokens=self.token_service)

    @cached_property
    def refresh_token_use_case(self) -> RefreshTokenUseCase:
        return RefreshTokenUseCase(tokens=self.token_service)

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(accounts=self.account_repository)

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(
            accounts=self.account_repository,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def deactivate_user_use_case(self) -> DeactivateUserUseCase:
        return DeactivateUserUseCase(accounts=self.account_repository, clock=self.clock)

    @cached_property
    def get_account_stats_use_case(self) -> GetAccountStatsUseCase:
        return GetAccountStatsUseCase(accounts=self.account_repository, clock=self.clock)

    @cached_property
    def get_login_history_use_case(self) -> GetLoginHistoryUseCase:
        return GetLoginHistoryUseCase(attempts=self.login_attempt_repository)

    @cached_property
    def authenticator(self) -> TokenAuthenticator:
        return TokenAuthenticator(self.verify_token_use_case)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_use_case=self.refresh_token_use_case,
            authenticator=self.authenticator,
            trust_proxy=self.config.security.trust_proxy_headers,
        )

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(
            get_profile=self.get_profile_use_case,
            update_profile=self.update_profile_use_case,
            deactivate_user=self.deactivate_user_use_case,
            get_stats=self.get_account_stats_use_case,
            get_login_history=self.get_login_history_use_case,
            authenticator=self.authenticator,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
