# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from user_service.application.services.password_hashing import WerkzeugPasswordHasher
from user_service.application.services.tokens import JwtTokenService
from user_service.application.use_cases.users.change_password import ChangePasswordUseCase
from user_service.application.use_cases.users.delete_account import DeleteAccountUseCase
from user_service.application.use_cases.users.get_profile import GetProfileUseCase
from user_service.application.use_cases.users.login_user import LoginUserUseCase
from user_service.application.use_cases.users.refresh_token import RefreshTokenUseCase
from user_service.application.use_cases.users.register_user import RegisterUserUseCase
from user_service.application.use_cases.users.update_profile import UpdateProfileUseCase
from user_service.infrastructure.db import create_engine_from_config, create_session_factory
from user_service.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from user_service.interfaces.http.auth import BearerAuthenticator
from user_service.interfaces.http.controllers.misc_controller import MiscController
from user_service.interfaces.http.controllers.users_controller import UsersController
from user_service.shared.config import AppConfig


class Container:
    """Wires the service graph for one configuration. Everything is built lazily, once."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def engine(self) -> Engine:
        return create_engine_from_config(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(
            method=self.config.hashing.hash_method,
            salt_length=self.config.hashing.salt_length,
        )

    @cached_property
    def token_service(self) -> JwtTokenService:
        jwt_config = self.config.jwt
        return JwtTokenService(
            secret=jwt_config.secret,
            expiration=jwt_config.expiration,
            refresh_grace=jwt_config.refresh_grace,
            algorithm=jwt_config.algorithm,
            issuer=jwt_config.issuer,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(users=self.user_repository)

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(users=self.user_repository)

    @cached_property
    def refresh_token_use_case(self) -> RefreshTokenUseCase:
        return RefreshTokenUseCase(users=self.user_repository, tokens=self.token_service)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def delete_account_use_case(self) -> DeleteAccountUseCase:
        return DeleteAccountUseCase(users=self.user_repository)

    @cached_property
    def authenticator(self) -> BearerAuthenticator:
        return BearerAuthenticator(self.token_service)

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            get_profile_use_case=self.get_profile_use_case,
            update_profile_use_case=self.update_profile_use_case,
            refresh_token_use_case=self.refresh_token_use_case,
            change_password_use_case=self.change_password_use_case,
            delete_account_use_case=self.delete_account_use_case,
            authenticator=self.authenticator,
            rate_limit_config=self.config.rate_limit,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)


__all__ = ["Container"]
